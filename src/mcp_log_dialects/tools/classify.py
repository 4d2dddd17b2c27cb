"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from mcp_log_dialects.core.config import base_dir, hard_limit
from mcp_log_dialects.core.log_service import classify_file, classify_line
from mcp_log_dialects.core.registry import default_registry
from mcp_log_dialects.core.results import ClassificationSet

from .models import ClassifyResponse

DEFAULT_LIMIT = 200


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def _parse_names(values: Sequence[str] | None) -> list[str] | None:
    """Lower-case and drop blanks; None or empty means 'no selection'."""
    if not values:
        return None
    out = [v.strip().lower() for v in values if v and v.strip()]
    return out or None


def classify_message_impl(
    *,
    message: str,
    dialects: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Implementation for the `classify_message` MCP tool."""
    registry = default_registry(_parse_names(dialects))
    line = classify_line(registry, 1, message)
    return ClassifyResponse.from_set(ClassificationSet([line]), include_message=False).model_dump()


async def classify_log_file_impl(
    *,
    log_path: str,
    dialects: Sequence[str] | None = None,
    line_types: Sequence[str] | None = None,
    contains: str | None = None,
    limit: int | None = None,
    include_unparsed: bool = False,
    include_message: bool = False,
) -> dict[str, Any]:
    """Implementation for the `classify_log_file` MCP tool.

    Notes
    -----
    - ``dialects`` picks the parsers used *and* filters the output to them.
    - ``limit`` defaults to DEFAULT_LIMIT and is capped at the configured hard limit.
    """
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    limit = min(limit, hard_limit())

    path = _safe_resolve(log_path)
    names = _parse_names(dialects)
    lines = await classify_file(
        path,
        limit=limit,
        registry=default_registry(names),
        contains=contains,
        dialects=names,
        line_types=_parse_names(line_types),
        include_unparsed=include_unparsed,
    )
    return ClassifyResponse.from_set(lines, include_message=include_message).model_dump()
