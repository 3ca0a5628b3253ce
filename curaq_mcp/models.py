"""Views of the CuraQ backend payloads.

The backend owns these entities; nothing here is cached or written back.
"""
from __future__ import annotations

import json
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Payload(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        populate_by_name=True,
    )


class Article(_Payload):
    id: str
    url: str = ""
    title: str = ""
    summary: str = ""
    tags: List[str] = Field(default_factory=list)
    reading_time_minutes: int = 0
    content_type: str = ""
    priority: Optional[float] = None
    status: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags(cls, v):
        return [] if v is None else v

    # Fields stay null while the backend is still analysing the page.
    @field_validator("url", "title", "summary", "content_type", mode="before")
    @classmethod
    def _none_text(cls, v):
        return "" if v is None else v

    @field_validator("reading_time_minutes", mode="before")
    @classmethod
    def _none_reading_time(cls, v):
        return 0 if v is None else v


class ArticleEvent(_Payload):
    action: str
    created_at: str


class ArticleList(_Payload):
    articles: List[Article] = Field(default_factory=list)

    @field_validator("articles", mode="before")
    @classmethod
    def _none_articles(cls, v):
        return [] if v is None else v


class ArticleDetail(_Payload):
    article: Article
    events: List[ArticleEvent] = Field(default_factory=list)

    @field_validator("events", mode="before")
    @classmethod
    def _none_events(cls, v):
        return [] if v is None else v


class SaveResult(_Payload):
    success: bool = True
    message: Optional[str] = None
    article_id: Optional[str] = Field(default=None, alias="articleId")
    restored: bool = False


class ApiError(BaseModel):
    """Error envelope of a non-2xx response."""

    http_status: int
    error_code: Optional[str] = None
    message: Optional[str] = None
    raw: str = ""

    @classmethod
    def from_body(cls, status: int, text: str) -> "ApiError":
        """Best-effort decode of ``{"error": ..., "message": ...}``; never raises."""
        error_code = message = None
        try:
            data = json.loads(text) if text else None
        except ValueError:
            data = None
        if isinstance(data, dict):
            if isinstance(data.get("error"), str):
                error_code = data["error"]
            if isinstance(data.get("message"), str):
                message = data["message"]
        return cls(
            http_status=status,
            error_code=error_code,
            message=message,
            raw=text or "",
        )
