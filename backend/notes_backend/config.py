from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


DEFAULT_CORS_ORIGINS: tuple[str, ...] = (
    r"^https?://localhost(:[0-9]+)?$",
    r"^https?://127\.0\.0\.1(:[0-9]+)?$",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True)
class AppConfig:
    port: int = 5000
    notes_mcp_host: str = "127.0.0.1"
    notes_mcp_port: int = 8765
    seed_notes: bool = True
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"


def _parse_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from exc


def _parse_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{raw}'")


def _split_tokens(raw: str) -> list[str]:
    return [token.strip() for token in re.split(r"[\s,]+", raw) if token.strip()]


def load_config() -> AppConfig:
    """Load configuration from environment variables/.env file."""
    backend_dir = Path(__file__).resolve().parent.parent
    load_dotenv(backend_dir / ".env")

    port = _parse_int("PORT", "5000")

    notes_mcp_host = os.getenv("NOTES_MCP_HOST", "127.0.0.1").strip() or "127.0.0.1"
    notes_mcp_port = _parse_int("NOTES_MCP_PORT", "8765")
    if notes_mcp_port <= 0:
        raise ConfigError("NOTES_MCP_PORT must be positive")

    seed_notes = _parse_bool("SEED_NOTES", True)

    cors_origins = tuple(_split_tokens(os.getenv("CORS_ORIGINS", ""))) or DEFAULT_CORS_ORIGINS

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"LOG_LEVEL must be a logging level name, got '{log_level}'")

    return AppConfig(
        port=port,
        notes_mcp_host=notes_mcp_host,
        notes_mcp_port=notes_mcp_port,
        seed_notes=seed_notes,
        cors_origins=cors_origins,
        log_level=log_level,
    )
