"""Environment-driven configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

ENABLED_ENV = "LOG_DIALECTS_ENABLED"
LOG_LEVEL_ENV = "LOG_DIALECTS_LOG_LEVEL"
BASE_DIR_ENV = "LOG_DIALECTS_BASE_DIR"
HARD_LIMIT_ENV = "LOG_DIALECTS_HARD_LIMIT"

DEFAULT_DIALECTS: tuple[str, ...] = ("rails", "sidekiq")
DEFAULT_HARD_LIMIT = 5000


def configure_logging() -> None:
    """Configure a reasonable default logging setup on stderr."""
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def enabled_dialects() -> tuple[str, ...]:
    """Dialect names for the default registry, in priority order."""
    env = os.getenv(ENABLED_ENV)
    if env is None or not env.strip():
        return DEFAULT_DIALECTS
    names = tuple(part.strip().lower() for part in env.split(",") if part.strip())
    if not names:
        raise ValueError(f"{ENABLED_ENV} must name at least one dialect")
    return names


def base_dir() -> Path:
    """Return the resolved base directory for file access."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def hard_limit() -> int:
    """Maximum number of results returned by the MCP tools."""
    env = os.getenv(HARD_LIMIT_ENV)
    if env is None or env == "":
        return DEFAULT_HARD_LIMIT
    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{HARD_LIMIT_ENV} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{HARD_LIMIT_ENV} must be >= 1")
    return value
