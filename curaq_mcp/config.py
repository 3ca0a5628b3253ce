from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

DEFAULT_API_URL = "https://curaq.app"
TOKEN_SETTINGS_URL = "https://curaq.app/settings/access-token"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(RuntimeError):
    """Startup configuration is unusable; the server must not start."""


@dataclass(frozen=True)
class ApiConfig:
    base_url: str = DEFAULT_API_URL
    token: str = field(default="", repr=False)


@dataclass(frozen=True)
class HttpConfig:
    user_agent: str = "curaq-mcp-server/0.1.0"
    # None leaves the request unbounded, as the backend decides its own limits.
    timeout_seconds: Optional[float] = None


@dataclass(frozen=True)
class DisplayConfig:
    # IANA zone name; None renders timestamps in the host's local zone.
    timezone: Optional[str] = None


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _read_yaml(path: Optional[str], environ: Mapping[str, str]) -> dict:
    cfg_path = (
        Path(path)
        if path
        else Path(environ.get("CURAQ_MCP_CONFIG", "env/config.yaml"))
    )
    if not cfg_path.exists():
        return {}
    with cfg_path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Cannot parse config file {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {cfg_path}")
    return data


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Build the process-wide config from YAML (optional) and environment.

    ``CURAQ_MCP_TOKEN`` is only ever taken from the environment and is
    required. ``CURAQ_API_URL`` and ``CURAQ_LOG_LEVEL`` override the file.
    """
    env = os.environ if environ is None else environ
    data = _read_yaml(path, env)

    api = data.get("api", {}) or {}
    http = data.get("http", {}) or {}
    display = data.get("display", {}) or {}
    log = data.get("logging", {}) or {}

    token = env.get("CURAQ_MCP_TOKEN", "").strip()
    if not token:
        raise ConfigError(
            "Missing required environment variable: CURAQ_MCP_TOKEN\n"
            f"Please generate a token at: {TOKEN_SETTINGS_URL}"
        )

    base_url = (
        env.get("CURAQ_API_URL") or api.get("base_url") or DEFAULT_API_URL
    ).rstrip("/")

    try:
        http_cfg = HttpConfig(**http)
        display_cfg = DisplayConfig(**display)
        log_cfg = LoggingConfig(**log)
    except TypeError as exc:
        raise ConfigError(f"Invalid config file: {exc}") from exc

    if env.get("CURAQ_LOG_LEVEL"):
        log_cfg = LoggingConfig(level=env["CURAQ_LOG_LEVEL"].upper())
    if not isinstance(log_cfg.level, str) or log_cfg.level.upper() not in _LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {log_cfg.level}")

    if display_cfg.timezone:
        try:
            ZoneInfo(display_cfg.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(
                f"Unknown display timezone: {display_cfg.timezone}"
            ) from exc

    return AppConfig(
        api=ApiConfig(base_url=base_url, token=token),
        http=http_cfg,
        display=display_cfg,
        logging=log_cfg,
    )
