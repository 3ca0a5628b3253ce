"""Static descriptors for the tools exposed to MCP clients."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from mcp import types

LIST_ARTICLES = "list_articles"
SEARCH_ARTICLES = "search_articles"
GET_ARTICLE = "get_article"
UPDATE_ARTICLE_STATUS = "update_article_status"
SAVE_ARTICLE = "save_article"

_JSON_TYPES = {"string": "string", "number": "number", "enum": "string"}


@dataclass(frozen=True)
class ParamSpec:
    name: str
    kind: str
    description: str
    required: bool = False
    default: Any = None
    allowed_values: Tuple[str, ...] = ()
    maximum: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind not in _JSON_TYPES:
            raise ValueError(f"Unknown parameter kind: {self.kind}")
        if self.required and self.default is not None:
            raise ValueError(f"Required parameter cannot have a default: {self.name}")
        if self.kind == "enum" and not self.allowed_values:
            raise ValueError(f"Enum parameter needs allowed values: {self.name}")

    def json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {
            "type": _JSON_TYPES[self.kind],
            "description": self.description,
        }
        if self.allowed_values:
            schema["enum"] = list(self.allowed_values)
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    parameters: Tuple[ParamSpec, ...] = ()

    def param(self, name: str) -> ParamSpec:
        for p in self.parameters:
            if p.name == name:
                return p
        raise KeyError(name)

    def input_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.json_schema() for p in self.parameters},
        }
        required = [p.name for p in self.parameters if p.required]
        if required:
            schema["required"] = required
        return schema


_ARTICLE_ID = ParamSpec(
    "article_id", "string", "記事のID（UUID形式）", required=True
)

TOOLS: Tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        LIST_ARTICLES,
        "未読記事の一覧を優先度順に取得します。"
        "記事のタイトル、要約、タグ、読了時間などの情報を返します。",
        (
            ParamSpec(
                "limit",
                "number",
                "取得する記事数の上限（デフォルト: 20、最大: 50）",
                default=20,
                maximum=50,
            ),
        ),
    ),
    ToolDescriptor(
        SEARCH_ARTICLES,
        "記事を検索します。キーワード検索またはAIセマンティック検索を選択できます。"
        "セマンティック検索は意味を理解して同義語や関連トピックも検出でき、"
        "自然言語の質問にも対応します。",
        (
            ParamSpec(
                "query",
                "string",
                "検索キーワードまたは検索クエリ（自然言語での質問も可）",
                required=True,
            ),
            ParamSpec(
                "mode",
                "enum",
                "検索モード（keyword: キーワード検索、semantic: AIセマンティック検索）",
                default="semantic",
                allowed_values=("keyword", "semantic"),
            ),
            ParamSpec(
                "limit",
                "number",
                "取得する記事数の上限（デフォルト: 10、最大: 30）",
                default=10,
                maximum=30,
            ),
        ),
    ),
    ToolDescriptor(
        GET_ARTICLE,
        "記事IDを指定して特定の記事の詳細を取得します。",
        (_ARTICLE_ID,),
    ),
    ToolDescriptor(
        UPDATE_ARTICLE_STATUS,
        "記事のステータスを更新します。既読マークまたは削除ができます。",
        (
            _ARTICLE_ID,
            ParamSpec(
                "action",
                "enum",
                "実行するアクション（read: 既読にする、delete: 削除する）",
                required=True,
                allowed_values=("read", "delete"),
            ),
        ),
    ),
    ToolDescriptor(
        SAVE_ARTICLE,
        "新しい記事をCuraQに保存します。"
        "URLを指定すると、AIが自動的に記事を分析してタイトル、要約、タグを生成します。",
        (
            ParamSpec("url", "string", "保存する記事のURL（必須）", required=True),
            ParamSpec(
                "title",
                "string",
                "記事のタイトル（オプション、省略時はAIが自動生成）",
            ),
            ParamSpec(
                "markdown",
                "string",
                "記事のMarkdown本文（オプション、指定すると分析精度が向上）",
            ),
        ),
    ),
)

_BY_NAME = {t.name: t for t in TOOLS}


def list_tools() -> List[ToolDescriptor]:
    return list(TOOLS)


def get_tool(name: str) -> Optional[ToolDescriptor]:
    return _BY_NAME.get(name)


def to_mcp_tool(tool: ToolDescriptor) -> types.Tool:
    return types.Tool(
        name=tool.name,
        description=tool.description,
        inputSchema=tool.input_schema(),
    )
