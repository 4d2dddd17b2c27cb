"""Sidekiq job log dialect.

    2026-02-04T20:46:15.201Z pid=4022623 tid=c8kxf7 class=Some::Job jid=9480cf0b elapsed=0.152 INFO: done
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar

from ..fields import FieldPattern
from ..models import SIDEKIQ_VARIANTS, LineType, LogRecord, SidekiqLog
from .base import SubParser
from .composite import DialectParser


@dataclass(frozen=True, slots=True)
class StartSubParser:
    """Parse ``INFO: start``."""

    def matches(self, message: str) -> bool:
        return message.endswith("INFO: start")

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        return {"line_type": LineType.START, "status": "start"}


@dataclass(frozen=True, slots=True)
class DoneSubParser:
    """Parse ``elapsed=0.152 INFO: done``; elapsed stays absent when not logged."""

    _elapsed = FieldPattern.compile("elapsed", r"elapsed=(?P<elapsed>\d+(?:\.\d+)?)\s+INFO:\s+done$")

    def matches(self, message: str) -> bool:
        return "INFO: done" in message

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        found = self._elapsed.extract(message)
        return {
            "line_type": LineType.DONE,
            "status": "done",
            "elapsed": float(found["elapsed"]) if found else None,
        }


@dataclass(frozen=True, slots=True)
class FailSubParser:
    """Parse ``INFO: fail`` and any ``ERROR:`` line."""

    _error = FieldPattern.compile("error", r"ERROR:\s*(?P<error_message>\S.*?)\s*$")

    def matches(self, message: str) -> bool:
        return "INFO: fail" in message or "ERROR:" in message

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {"line_type": LineType.FAIL, "status": "fail"}
        out.update(self._error.extract(message) or {})
        return out


BUILT_IN_SUB_PARSERS: Mapping[str, SubParser] = MappingProxyType(
    {
        "start": StartSubParser(),
        "done": DoneSubParser(),
        "fail": FailSubParser(),
    }
)

SIDEKIQ_PREFIX = FieldPattern.compile(
    "sidekiq",
    r"^\d{4}-\d{2}-\d{2}T[\d:.]+Z\s+pid=\d+\s+tid=\w+\s+class=",
)

BASE_FIELDS = FieldPattern.compile(
    "sidekiq_context",
    r"^(?P<timestamp>\d{4}-\d{2}-\d{2}T[\d:.]+Z)\s+"
    r"pid=(?P<pid>\d+)\s+"
    r"tid=(?P<tid>\w+)\s+"
    r"class=(?P<job_class>[\w:]+)\s+"
    r"jid=(?P<jid>\w+)",
)


class SidekiqParser(DialectParser):
    """Background-job dialect keyed on the timestamp/pid/tid/class prefix."""

    parser_name: ClassVar[str] = "sidekiq"
    built_in_sub_parsers: ClassVar[Mapping[str, SubParser]] = BUILT_IN_SUB_PARSERS
    record_type: ClassVar[type[LogRecord]] = SidekiqLog
    record_variants: ClassVar[Mapping[str, type[LogRecord]]] = SIDEKIQ_VARIANTS

    __slots__ = ()

    def matches(self, message: str) -> bool:
        return SIDEKIQ_PREFIX.matches(message)

    def extract_context(self, message: str) -> dict[str, Any] | None:
        # Lines without a jid pass the prefix test but carry no usable context.
        return BASE_FIELDS.extract(message)
