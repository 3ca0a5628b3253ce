"""Turn a tool invocation into the single backend request it needs.

Malformed optional arguments fall back to their defaults; missing or
malformed required ones raise ``ArgumentError`` before anything is sent.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote, urlencode

from . import messages
from .config import AppConfig
from .tools import (
    GET_ARTICLE,
    LIST_ARTICLES,
    SAVE_ARTICLE,
    SEARCH_ARTICLES,
    UPDATE_ARTICLE_STATUS,
    get_tool,
)

ARTICLES_PATH = "/api/v1/articles"
KEYWORD = "keyword"
SEMANTIC = "semantic"
ACTIONS = ("read", "delete")


class ArgumentError(ValueError):
    """Invalid tool arguments; the message is shown to the caller as is."""


class UnknownToolError(LookupError):
    def __init__(self, name: str):
        super().__init__(messages.UNKNOWN_TOOL.format(name=name))
        self.name = name


@dataclass(frozen=True)
class ApiRequest:
    tool: str
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict, repr=False)
    body: Optional[Dict[str, Any]] = None
    params: Dict[str, Any] = field(default_factory=dict)


def _coerce_limit(value: Any, default: int, cap: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    n = int(value)
    if n < 1:
        return default
    return min(n, cap)


def _text(args: Mapping[str, Any], key: str) -> Optional[str]:
    value = args.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _limit(tool: str, args: Mapping[str, Any]) -> int:
    param = get_tool(tool).param("limit")
    return _coerce_limit(args.get("limit"), param.default, param.maximum)


def _headers(cfg: AppConfig, json_body: bool = False) -> Dict[str, str]:
    headers = {
        "Authorization": f"Bearer {cfg.api.token}",
        "User-Agent": cfg.http.user_agent,
    }
    if json_body:
        headers["Content-Type"] = "application/json"
    return headers


def _article_url(cfg: AppConfig, article_id: str, suffix: str = "") -> str:
    return f"{cfg.api.base_url}{ARTICLES_PATH}/{quote(article_id, safe='')}{suffix}"


def _list_articles(args: Mapping[str, Any], cfg: AppConfig) -> ApiRequest:
    limit = _limit(LIST_ARTICLES, args)
    return ApiRequest(
        tool=LIST_ARTICLES,
        method="GET",
        url=f"{cfg.api.base_url}{ARTICLES_PATH}?{urlencode({'limit': limit})}",
        headers=_headers(cfg),
        params={"limit": limit},
    )


def _search_articles(args: Mapping[str, Any], cfg: AppConfig) -> ApiRequest:
    query = _text(args, "query")
    if query is None:
        raise ArgumentError(messages.QUERY_REQUIRED)
    mode = KEYWORD if args.get("mode") == KEYWORD else SEMANTIC
    limit = _limit(SEARCH_ARTICLES, args)
    endpoint = "search" if mode == KEYWORD else "semantic-search"
    qs = urlencode({"q": query, "limit": limit}, quote_via=quote)
    return ApiRequest(
        tool=SEARCH_ARTICLES,
        method="GET",
        url=f"{cfg.api.base_url}{ARTICLES_PATH}/{endpoint}?{qs}",
        headers=_headers(cfg),
        params={"query": query, "mode": mode, "limit": limit},
    )


def _get_article(args: Mapping[str, Any], cfg: AppConfig) -> ApiRequest:
    article_id = _text(args, "article_id")
    if article_id is None:
        raise ArgumentError(messages.ARTICLE_ID_REQUIRED)
    return ApiRequest(
        tool=GET_ARTICLE,
        method="GET",
        url=_article_url(cfg, article_id),
        headers=_headers(cfg),
        params={"article_id": article_id},
    )


def _update_article_status(args: Mapping[str, Any], cfg: AppConfig) -> ApiRequest:
    article_id = _text(args, "article_id")
    action = _text(args, "action")
    if article_id is None or action is None:
        raise ArgumentError(messages.ID_AND_ACTION_REQUIRED)
    if action not in ACTIONS:
        raise ArgumentError(messages.INVALID_ACTION)
    if action == "read":
        method, url = "POST", _article_url(cfg, article_id, "/read")
    else:
        method, url = "DELETE", _article_url(cfg, article_id)
    return ApiRequest(
        tool=UPDATE_ARTICLE_STATUS,
        method=method,
        url=url,
        headers=_headers(cfg),
        params={"article_id": article_id, "action": action},
    )


def _save_article(args: Mapping[str, Any], cfg: AppConfig) -> ApiRequest:
    url = _text(args, "url")
    if url is None:
        raise ArgumentError(messages.URL_REQUIRED)
    body: Dict[str, Any] = {"url": url}
    # Absent and empty are different to the backend: only send real values.
    for key in ("title", "markdown"):
        value = args.get(key)
        if isinstance(value, str) and value:
            body[key] = value
    return ApiRequest(
        tool=SAVE_ARTICLE,
        method="POST",
        url=f"{cfg.api.base_url}{ARTICLES_PATH}",
        headers=_headers(cfg, json_body=True),
        body=body,
        params={"url": url},
    )


_BUILDERS = {
    LIST_ARTICLES: _list_articles,
    SEARCH_ARTICLES: _search_articles,
    GET_ARTICLE: _get_article,
    UPDATE_ARTICLE_STATUS: _update_article_status,
    SAVE_ARTICLE: _save_article,
}


def build_request(
    tool: str, args: Optional[Mapping[str, Any]], cfg: AppConfig
) -> ApiRequest:
    builder = _BUILDERS.get(tool)
    if builder is None:
        raise UnknownToolError(tool)
    return builder(args or {}, cfg)
