"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_log_dialects.core.config import BASE_DIR_ENV, base_dir
from mcp_log_dialects.core.registry import DIALECTS
from mcp_log_dialects.tools.models import ClassifyResponse

SAMPLE_LOG = (
    "Feb  4 22:37:47 ip-10-15-1-216 cryo[1030829]: [c3784123-8ce1-4b7e-8583-3e6f61ef5676] "
    'Started GET "/shipments/443155" for 45.77.120.91 at 2026-02-04 22:37:47 +0000\n'
    "Feb  4 22:37:47 ip-10-15-1-216 cryo[1030829]: [c3784123-8ce1-4b7e-8583-3e6f61ef5676] "
    "Processing by ShipmentsController#show as HTML\n"
    "Feb  4 22:37:47 ip-10-15-1-216 cryo[1030829]: [c3784123-8ce1-4b7e-8583-3e6f61ef5676] "
    'Parameters: {"id"=>"443155"}\n'
    "Feb  4 22:37:47 ip-10-15-1-216 cryo[1030829]: [c3784123-8ce1-4b7e-8583-3e6f61ef5676] "
    "Completed 200 OK in 48ms (Views: 20.1ms | ActiveRecord: 9.3ms)\n"
    "2026-02-04T20:46:15.049Z pid=4022623 tid=c8kxf7 class=Logging::Broadcast::Job "
    "jid=9480cf0b927e443155f15a3f INFO: start\n"
    "2026-02-04T20:46:15.201Z pid=4022623 tid=c8kxf7 class=Logging::Broadcast::Job "
    "jid=9480cf0b927e443155f15a3f elapsed=0.152 INFO: done\n"
)


def dialect_catalog() -> dict[str, list[str]]:
    """Return each built-in dialect with its sub-parser names, in default order."""
    return {name: list(cls.available_sub_parsers()) for name, cls in DIALECTS.items()}


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://log-dialects/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        return (
            "Resources:\n"
            "- app://log-dialects/help\n"
            "- app://log-dialects/catalog\n"
            "- app://log-dialects/schemas/classify-response\n"
            "- app://log-dialects/examples/sample-log\n"
            f"\nTool file access is restricted to {BASE_DIR_ENV}: {base_dir()}\n"
        )

    @mcp.resource("app://log-dialects/catalog")
    def catalog() -> dict[str, list[str]]:
        """Return the built-in dialects and their sub-parsers."""
        return dialect_catalog()

    @mcp.resource("app://log-dialects/examples/sample-log")
    def sample_log() -> str:
        """Return a tiny sample log for demos and tests."""
        return SAMPLE_LOG

    @mcp.resource("app://log-dialects/schemas/classify-response")
    def classify_response_schema() -> dict[str, Any]:
        """Return the JSON schema for tool responses."""
        return ClassifyResponse.model_json_schema()
