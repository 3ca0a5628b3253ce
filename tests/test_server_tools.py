from __future__ import annotations

import json
from typing import Any, List, Optional

import pytest
import requests

from curaq_mcp import messages
from curaq_mcp.config import ApiConfig, AppConfig, DisplayConfig
from curaq_mcp.server import call_tool


class _FakeResponse:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text


class _FakeBackend:
    """Stands in for ``requests.request`` and records every call."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self.text = json.dumps(payload) if text is None else text
        self.calls: List[dict] = []

    def __call__(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        return _FakeResponse(self.status_code, self.text)


def _cfg() -> AppConfig:
    return AppConfig(
        api=ApiConfig(base_url="https://curaq.test", token="secret"),
        display=DisplayConfig(timezone="UTC"),
    )


@pytest.fixture
def backend(monkeypatch) -> _FakeBackend:
    fake = _FakeBackend(payload={"articles": []})
    monkeypatch.setattr(requests, "request", fake)
    return fake


@pytest.mark.parametrize(
    "tool, args",
    [
        ("search_articles", {}),
        ("get_article", {}),
        ("update_article_status", {"article_id": "a1"}),
        ("update_article_status", {"article_id": "a1", "action": "archive"}),
        ("save_article", {"title": "no url"}),
        ("does_not_exist", {"x": 1}),
    ],
)
def test_validation_failures_make_no_network_call(
    backend: _FakeBackend, tool: str, args: dict
) -> None:
    result = call_tool(tool, args, _cfg())

    assert not result.ok
    assert result.text
    assert backend.calls == []


def test_list_articles_requests_capped_limit(backend: _FakeBackend) -> None:
    call_tool("list_articles", {"limit": 999}, _cfg())

    assert len(backend.calls) == 1
    call = backend.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://curaq.test/api/v1/articles?limit=50"
    assert call["headers"]["Authorization"] == "Bearer secret"
    assert call["json"] is None
    assert call["timeout"] is None


def test_list_articles_empty(backend: _FakeBackend) -> None:
    result = call_tool("list_articles", {}, _cfg())
    assert result.ok
    assert result.text == messages.NO_UNREAD
    assert backend.calls[0]["url"].endswith("?limit=20")


def test_search_endpoint_by_mode(backend: _FakeBackend) -> None:
    call_tool("search_articles", {"query": "llm"}, _cfg())
    call_tool("search_articles", {"query": "llm", "mode": "keyword"}, _cfg())
    call_tool("search_articles", {"query": "llm", "mode": "fuzzy"}, _cfg())

    paths = [c["url"].split("?")[0] for c in backend.calls]
    assert paths == [
        "https://curaq.test/api/v1/articles/semantic-search",
        "https://curaq.test/api/v1/articles/search",
        "https://curaq.test/api/v1/articles/semantic-search",
    ]


def test_semantic_503(monkeypatch) -> None:
    monkeypatch.setattr(requests, "request", _FakeBackend(503, text="down"))

    semantic = call_tool("search_articles", {"query": "q"}, _cfg())
    keyword = call_tool("search_articles", {"query": "q", "mode": "keyword"}, _cfg())

    assert semantic.text == messages.SEMANTIC_UNAVAILABLE
    assert keyword.text == "エラー (503): down"


def test_save_article_posts_json(monkeypatch) -> None:
    fake = _FakeBackend(
        201, payload={"success": True, "message": "saved", "articleId": "new-1"}
    )
    monkeypatch.setattr(requests, "request", fake)

    result = call_tool(
        "save_article", {"url": "https://example.com/a", "title": "A"}, _cfg()
    )

    call = fake.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://curaq.test/api/v1/articles"
    assert call["json"] == {"url": "https://example.com/a", "title": "A"}
    assert call["headers"]["Content-Type"] == "application/json"
    assert result.text == "記事を保存しました\n\nURL: https://example.com/a\n記事ID: new-1"


def test_save_article_unread_limit(monkeypatch) -> None:
    monkeypatch.setattr(
        requests, "request", _FakeBackend(400, payload={"error": "unread-limit"})
    )
    result = call_tool("save_article", {"url": "https://example.com/a"}, _cfg())
    assert result.text == messages.UNREAD_LIMIT


def test_update_status_delete(monkeypatch) -> None:
    fake = _FakeBackend(200, text='{"success": true}')
    monkeypatch.setattr(requests, "request", fake)

    result = call_tool(
        "update_article_status", {"article_id": "a1", "action": "delete"}, _cfg()
    )

    assert fake.calls[0]["method"] == "DELETE"
    assert result.text == "記事を削除しました（ID: a1）"


def test_get_article_twice_is_identical(monkeypatch) -> None:
    payload = {
        "article": {
            "id": "a1",
            "url": "https://example.com/a",
            "title": "A",
            "summary": "s",
            "tags": ["x"],
            "reading_time_minutes": 3,
            "content_type": "article",
            "status": "read",
            "created_at": "2024-05-01T00:00:00Z",
        },
        "events": [{"action": "read", "created_at": "2024-05-02T10:00:00Z"}],
    }
    monkeypatch.setattr(requests, "request", _FakeBackend(200, payload=payload))

    first = call_tool("get_article", {"article_id": "a1"}, _cfg())
    second = call_tool("get_article", {"article_id": "a1"}, _cfg())

    assert first == second
    assert "**ステータス**: 既読" in first.text
    assert "- read (2024/5/2 10:00:00)" in first.text


def test_network_failure_is_rendered(monkeypatch) -> None:
    def boom(*args: Any, **kwargs: Any) -> None:
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "request", boom)

    result = call_tool("list_articles", {}, _cfg())

    assert not result.ok
    assert result.text == "エラーが発生しました: connection refused"


def test_malformed_success_body_is_rendered(monkeypatch) -> None:
    monkeypatch.setattr(requests, "request", _FakeBackend(200, text="<html>"))

    result = call_tool("list_articles", {}, _cfg())

    assert not result.ok
    assert result.text.startswith("エラーが発生しました: ")


def test_token_is_not_logged(backend: _FakeBackend, caplog) -> None:
    caplog.set_level("DEBUG")
    call_tool("list_articles", {}, _cfg())
    assert "secret" not in caplog.text
