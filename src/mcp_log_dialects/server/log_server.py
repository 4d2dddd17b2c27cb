"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: classify a single message or a whole log file
- Resources: dialect catalog, sample log and response schema

Run locally (stdio):
    python -m mcp_log_dialects.server.log_server
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_log_dialects.core.config import configure_logging
from mcp_log_dialects.resources.registry import register_resources
from mcp_log_dialects.tools.classify import classify_log_file_impl, classify_message_impl

LOGGER = logging.getLogger(__name__)


mcp = FastMCP("log-dialects", json_response=True)

register_resources(mcp)


@mcp.tool()
def classify_message(
    message: str,
    dialects: Sequence[str] | None = None,
) -> dict[str, Any]:
    """Classify one raw log message into a structured record.

    Parameters
    ----------
    message:
        The raw log line, including any syslog envelope.
    dialects:
        Dialect parsers to try, in priority order (e.g., ["rails", "sidekiq"]).
        Defaults to LOG_DIALECTS_ENABLED or every built-in dialect.

    Returns
    -------
    dict:
        {"count": int, "counts": dict, "entries": list[dict]}
    """
    return classify_message_impl(message=message, dialects=dialects)


@mcp.tool()
async def classify_log_file(
    log_path: str,
    dialects: Sequence[str] | None = None,
    line_types: Sequence[str] | None = None,
    contains: str | None = None,
    limit: int | None = None,
    include_unparsed: bool = False,
    include_message: bool = False,
) -> dict[str, Any]:
    """Classify every line of a local log file.

    Parameters
    ----------
    log_path:
        Path to a local log file under LOG_DIALECTS_BASE_DIR. Supports plain text and .gz.
    dialects:
        Dialect parsers to use; the output is restricted to them.
    line_types:
        Keep only records with these line types (e.g., ["request", "completed"]).
    contains:
        Substring filter applied to the raw line before parsing.
    limit:
        Maximum number of entries returned (hard-capped in the implementation).
    include_unparsed:
        Also return lines no parser recognized (ignored when filtering).
    include_message:
        Whether to include the original line in each entry.

    Returns
    -------
    dict:
        {"count": int, "counts": dict, "entries": list[dict]}
    """
    return await classify_log_file_impl(
        log_path=log_path,
        dialects=dialects,
        line_types=line_types,
        contains=contains,
        limit=limit,
        include_unparsed=include_unparsed,
        include_message=include_message,
    )


def main() -> None:
    """Start the MCP server over stdio."""
    configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
