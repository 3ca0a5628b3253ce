"""Classify backend responses and render them as display text.

Everything here is a pure function of the request, the HTTP status and the
body text. A 2xx body that does not decode into the expected shape raises
(``ValueError``/``pydantic.ValidationError``); the dispatcher owns that case.
"""
from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Callable, Dict, List, Optional

from . import messages
from .mapper import KEYWORD, SEMANTIC, ApiRequest
from .models import ApiError, Article, ArticleDetail, ArticleList, SaveResult
from .tools import (
    GET_ARTICLE,
    LIST_ARTICLES,
    SAVE_ARTICLE,
    SEARCH_ARTICLES,
    UPDATE_ARTICLE_STATUS,
)


@dataclass(frozen=True)
class ToolResult:
    """Display text for one invocation.

    Success and handled failures travel to the client the same way; ``ok``
    only matters for logging and tests.
    """

    text: str
    ok: bool = True

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(text=text, ok=True)

    @classmethod
    def failure(cls, text: str) -> "ToolResult":
        return cls(text=text, ok=False)


class ErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    SEMANTIC_UNAVAILABLE = "semantic_unavailable"
    UNREAD_LIMIT = "unread-limit"
    LIMIT_REACHED = "limit-reached"
    ALREADY_READ = "already-read"
    INVALID_CONTENT = "invalid-content"
    GENERIC = "generic"


_SAVE_ERROR_CODES = {
    ErrorKind.UNREAD_LIMIT.value: ErrorKind.UNREAD_LIMIT,
    ErrorKind.LIMIT_REACHED.value: ErrorKind.LIMIT_REACHED,
    ErrorKind.ALREADY_READ.value: ErrorKind.ALREADY_READ,
    ErrorKind.INVALID_CONTENT.value: ErrorKind.INVALID_CONTENT,
}

_FIXED_ERROR_TEXT = {
    ErrorKind.FORBIDDEN: messages.FORBIDDEN,
    ErrorKind.SEMANTIC_UNAVAILABLE: messages.SEMANTIC_UNAVAILABLE,
    ErrorKind.UNREAD_LIMIT: messages.UNREAD_LIMIT,
    ErrorKind.LIMIT_REACHED: messages.LIMIT_REACHED,
    ErrorKind.ALREADY_READ: messages.ALREADY_READ,
    ErrorKind.INVALID_CONTENT: messages.INVALID_CONTENT,
}


def classify(request: ApiRequest, error: ApiError) -> ErrorKind:
    status = error.http_status
    tool = request.tool
    if status == 404 and tool in (GET_ARTICLE, UPDATE_ARTICLE_STATUS):
        return ErrorKind.NOT_FOUND
    if status == 403 and tool == GET_ARTICLE:
        return ErrorKind.FORBIDDEN
    if (
        status == 503
        and tool == SEARCH_ARTICLES
        and request.params.get("mode") == SEMANTIC
    ):
        return ErrorKind.SEMANTIC_UNAVAILABLE
    if status == 400 and tool == SAVE_ARTICLE:
        return _SAVE_ERROR_CODES.get(error.error_code or "", ErrorKind.GENERIC)
    return ErrorKind.GENERIC


def format_generic_error(request: ApiRequest, error: ApiError) -> str:
    detail = error.message or error.error_code or error.raw.strip()
    if not detail:
        detail = (
            messages.SAVE_FAILED_DETAIL
            if request.tool == SAVE_ARTICLE
            else messages.UNKNOWN_ERROR_DETAIL
        )
    return messages.GENERIC_ERROR.format(status=error.http_status, detail=detail)


def render_error(request: ApiRequest, error: ApiError) -> str:
    kind = classify(request, error)
    if kind is ErrorKind.NOT_FOUND:
        return messages.NOT_FOUND.format(article_id=request.params["article_id"])
    if kind is ErrorKind.GENERIC:
        return format_generic_error(request, error)
    return _FIXED_ERROR_TEXT[kind]


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date(value: Optional[str], tz: Optional[tzinfo] = None) -> str:
    if not value:
        return messages.UNKNOWN_LABEL
    dt = _parse_timestamp(value)
    if dt is None:
        return value
    dt = dt.astimezone(tz)
    return f"{dt.year}/{dt.month}/{dt.day}"


def format_datetime(value: str, tz: Optional[tzinfo] = None) -> str:
    dt = _parse_timestamp(value)
    if dt is None:
        return value
    dt = dt.astimezone(tz)
    return f"{dt.year}/{dt.month}/{dt.day} {dt.hour}:{dt.minute:02d}:{dt.second:02d}"


def status_label(status: Optional[str]) -> str:
    return messages.STATUS_LABELS.get(status or "", messages.UNKNOWN_LABEL)


def _article_entry(index: int, article: Article) -> str:
    return (
        f"[{index}] {article.title} ({article.reading_time_minutes}分)\n"
        f"    {article.url}\n"
        f"    タグ: {', '.join(article.tags)}\n"
        f"    ID: {article.id}"
    )


def _article_listing(header: str, articles: List[Article]) -> str:
    entries = "\n\n".join(
        _article_entry(i, a) for i, a in enumerate(articles, start=1)
    )
    return f"{header}\n{messages.DETAIL_HINT}\n\n{entries}"


def _render_list(request: ApiRequest, data, tz) -> str:
    articles = ArticleList.model_validate(data).articles
    if not articles:
        return messages.NO_UNREAD
    header = messages.UNREAD_HEADER.format(count=len(articles))
    return _article_listing(header, articles)


def _render_search(request: ApiRequest, data, tz) -> str:
    articles = ArticleList.model_validate(data).articles
    query = request.params["query"]
    keyword = request.params.get("mode") == KEYWORD
    if not articles:
        template = messages.NO_KEYWORD_MATCH if keyword else messages.NO_SEMANTIC_MATCH
        return template.format(query=query)
    header = messages.SEARCH_HEADER.format(
        label=messages.KEYWORD_LABEL if keyword else messages.SEMANTIC_LABEL,
        query=query,
        count=len(articles),
    )
    return _article_listing(header, articles)


def _render_detail(request: ApiRequest, data, tz) -> str:
    detail = ArticleDetail.model_validate(data)
    article = detail.article
    history = "\n".join(
        f"- {e.action} ({format_datetime(e.created_at, tz)})" for e in detail.events
    )
    return (
        f"# {article.title}\n"
        "\n"
        f"**URL**: {article.url}\n"
        f"**ステータス**: {status_label(article.status)}\n"
        f"**読了時間**: {article.reading_time_minutes}分\n"
        f"**タグ**: {', '.join(article.tags)}\n"
        f"**コンテンツタイプ**: {article.content_type}\n"
        f"**保存日**: {format_date(article.created_at, tz)}\n"
        "\n"
        "**要約**:\n"
        f"{article.summary}\n"
        "\n"
        f"**記事ID**: {article.id}\n"
        "\n"
        "**イベント履歴**:\n"
        f"{history}"
    )


def _render_update(request: ApiRequest, data, tz) -> str:
    template = (
        messages.MARKED_READ
        if request.params["action"] == "read"
        else messages.DELETED
    )
    return template.format(article_id=request.params["article_id"])


def _render_save(request: ApiRequest, data, tz) -> str:
    result = SaveResult.model_validate(data)
    if result.restored:
        message = messages.RESTORED
    elif result.message == messages.ALREADY_SAVED:
        message = messages.ALREADY_SAVED
    else:
        message = messages.SAVED
    article_id = result.article_id or messages.UNKNOWN_LABEL
    return f"{message}\n\nURL: {request.params['url']}\n記事ID: {article_id}"


_RENDERERS: Dict[str, Callable[[ApiRequest, object, Optional[tzinfo]], str]] = {
    LIST_ARTICLES: _render_list,
    SEARCH_ARTICLES: _render_search,
    GET_ARTICLE: _render_detail,
    UPDATE_ARTICLE_STATUS: _render_update,
    SAVE_ARTICLE: _render_save,
}


def interpret(
    request: ApiRequest,
    status: int,
    body: str,
    tz: Optional[tzinfo] = None,
) -> ToolResult:
    if not 200 <= status < 300:
        return ToolResult.failure(render_error(request, ApiError.from_body(status, body)))
    # Status updates carry nothing we need in the body.
    if request.tool == UPDATE_ARTICLE_STATUS:
        data = None
    else:
        data = json.loads(body)
    return ToolResult.success(_RENDERERS[request.tool](request, data, tz))
