"""
Tool dispatch for the CuraQ backend: map the invocation onto one HTTP call,
interpret the response, and always hand back display text.
"""
from __future__ import annotations

import logging
from datetime import tzinfo
from functools import lru_cache
from typing import Any, Mapping, Optional, Tuple
from urllib.parse import urlsplit
from zoneinfo import ZoneInfo

import requests

from . import messages
from .config import AppConfig
from .interpreter import ToolResult, interpret
from .mapper import ApiRequest, ArgumentError, UnknownToolError, build_request

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _zone(name: Optional[str]) -> Optional[tzinfo]:
    return ZoneInfo(name) if name else None


def send(request: ApiRequest, cfg: AppConfig) -> Tuple[int, str]:
    """Issue the request once; no retries."""
    logger.info(
        "%s %s %s", request.tool, request.method, urlsplit(request.url).path
    )
    resp = requests.request(
        request.method,
        request.url,
        headers=request.headers,
        json=request.body,
        timeout=cfg.http.timeout_seconds,
    )
    if resp.status_code >= 400:
        logger.warning(
            "%s: backend answered %s", request.tool, resp.status_code
        )
    return resp.status_code, resp.text


def call_tool(
    name: str, arguments: Optional[Mapping[str, Any]], cfg: AppConfig
) -> ToolResult:
    """Run one tool invocation. Never raises."""
    try:
        request = build_request(name, arguments, cfg)
        status, body = send(request, cfg)
        return interpret(request, status, body, _zone(cfg.display.timezone))
    except (ArgumentError, UnknownToolError) as exc:
        logger.info("%s rejected: %s", name, exc)
        return ToolResult.failure(str(exc))
    except Exception as exc:
        logger.exception("%s failed", name)
        return ToolResult.failure(messages.UNEXPECTED.format(error=exc))
