"""Rails request log dialect.

Lines carry a bracketed request UUID and may sit behind a syslog envelope:

    Feb  4 22:37:47 ip-10-15-1-216 cryo[1030829]: [c3784123-...] Started GET "/x" for 1.2.3.4 at ...
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar

from ..fields import FieldPattern
from ..models import RAILS_VARIANTS, LineType, LogRecord, RailsLog
from .base import SubParser
from .composite import DialectParser

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")

_HASH_ROCKET = re.compile(r"\s*=>\s*")
_SYMBOL_KEY = re.compile(r"(?<=[{\[,\s]):(\w+)")
_NIL = re.compile(r"\bnil\b")


def parse_params(text: str) -> dict[str, Any]:
    """Parse a Ruby hash literal (``{"id"=>"1", :k=>nil}``) into a dict.

    Falls back to ``{"raw": text}`` when the literal cannot be read.
    """
    converted = _HASH_ROCKET.sub(": ", text)
    converted = _SYMBOL_KEY.sub(r'"\1"', converted)
    converted = _NIL.sub("null", converted)
    try:
        value = json.loads(converted)
    except json.JSONDecodeError:
        return {"raw": text}
    if not isinstance(value, dict):
        return {"raw": text}
    return value


@dataclass(frozen=True, slots=True)
class RequestSubParser:
    """Parse ``Started GET "/path" for 1.2.3.4 at 2026-02-04 18:37:21 +0000``."""

    _fields = FieldPattern.compile(
        "request",
        r"Started\s+(?P<http_method>" + "|".join(HTTP_METHODS) + r")\s+"
        r'"(?P<path>[^"]+)"\s+'
        r"for\s+(?P<ip_address>[0-9A-Fa-f:.]+)\s+"
        r"at\s+(?P<request_timestamp>.+)$",
    )

    def matches(self, message: str) -> bool:
        return "Started " in message and any(f" {m} " in message for m in HTTP_METHODS)

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        found = self._fields.extract(message)
        if found is None:
            return {}
        return {"line_type": LineType.REQUEST, **found}


@dataclass(frozen=True, slots=True)
class ParametersSubParser:
    """Parse ``Parameters: {"id"=>"123"}``."""

    _fields = FieldPattern.compile("parameters", r"Parameters:\s+(?P<params>\{.+\})\s*$")

    def matches(self, message: str) -> bool:
        return "Parameters: {" in message

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        found = self._fields.extract(message)
        if found is None:
            return {}
        return {"line_type": LineType.PARAMETERS, "params": parse_params(found["params"])}


@dataclass(frozen=True, slots=True)
class RedirectSubParser:
    """Parse ``Redirected to https://...``."""

    _fields = FieldPattern.compile("redirect", r"Redirected to\s+(?P<redirect_url>.+)$")

    def matches(self, message: str) -> bool:
        return "Redirected to " in message

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        found = self._fields.extract(message)
        if found is None:
            return {}
        return {"line_type": LineType.REDIRECT, "redirect_url": found["redirect_url"].strip()}


@dataclass(frozen=True, slots=True)
class ActiveJobSubParser:
    """Parse ``[ActiveJob] Enqueued MyJob (Job ID: abc) to Sidekiq(default) with arguments: ...``."""

    _fields = FieldPattern.compile(
        "active_job",
        r"\[ActiveJob\]\s+Enqueued\s+(?P<job_class>[\w:]+)\s+"
        r"\(Job ID:\s+(?P<job_id>[^)]+)\)\s+"
        r"to\s+\w+\((?P<queue>[\w.-]+)\)"
        r"(?:\s+with arguments:\s+(?P<arguments>.+))?$",
    )

    def matches(self, message: str) -> bool:
        return "[ActiveJob] Enqueued" in message

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        found = self._fields.extract(message)
        if found is None:
            return {}
        out: dict[str, Any] = {"line_type": LineType.ACTIVE_JOB, **found}
        if "arguments" in out:
            out["arguments"] = out["arguments"].strip()
        return out


@dataclass(frozen=True, slots=True)
class ProcessingSubParser:
    """Parse ``Processing by ShipmentsController#show as HTML``."""

    _fields = FieldPattern.compile(
        "processing",
        r"Processing by\s+(?P<controller>[\w:]+)#(?P<action>\w+)\s+as\s+(?P<format>\S+)",
    )

    def matches(self, message: str) -> bool:
        return "Processing by " in message

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        found = self._fields.extract(message)
        if found is None:
            return {}
        return {"line_type": LineType.PROCESSING, **found}


@dataclass(frozen=True, slots=True)
class CompletedSubParser:
    """Parse ``Completed 200 OK in 123ms``; durations in seconds become milliseconds."""

    _fields = FieldPattern.compile(
        "completed",
        r"Completed\s+(?P<status>\d{3})\b.*?\s+in\s+"
        r"(?P<duration>\d+(?:\.\d+)?)(?P<unit>ms|s)\b",
    )

    def matches(self, message: str) -> bool:
        return "Completed " in message

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        found = self._fields.extract(message)
        if found is None:
            return {}
        duration = float(found["duration"])
        if found["unit"] == "s":
            duration *= 1000
        return {
            "line_type": LineType.COMPLETED,
            "status_code": int(found["status"]),
            "duration_ms": duration,
        }


BUILT_IN_SUB_PARSERS: Mapping[str, SubParser] = MappingProxyType(
    {
        "request": RequestSubParser(),
        "parameters": ParametersSubParser(),
        "redirect": RedirectSubParser(),
        "active_job": ActiveJobSubParser(),
        "processing": ProcessingSubParser(),
        "completed": CompletedSubParser(),
    }
)

REQUEST_ID = FieldPattern.compile("request_id", r"\[(?P<request_id>[a-f0-9-]{36})\]")

SYSLOG_PREFIX = FieldPattern.compile(
    "syslog",
    r"^(?P<syslog_timestamp>\w+\s+\d+\s+[\d:]+)\s+"
    r"(?P<server>[\w.-]+)\s+"
    r"[\w.-]+\[(?P<process_id>\d+)\]:\s*",
)


class RailsParser(DialectParser):
    """Web-request dialect keyed on the bracketed request UUID."""

    parser_name: ClassVar[str] = "rails"
    built_in_sub_parsers: ClassVar[Mapping[str, SubParser]] = BUILT_IN_SUB_PARSERS
    record_type: ClassVar[type[LogRecord]] = RailsLog
    record_variants: ClassVar[Mapping[str, type[LogRecord]]] = RAILS_VARIANTS

    __slots__ = ()

    def matches(self, message: str) -> bool:
        return REQUEST_ID.matches(message)

    def extract_context(self, message: str) -> dict[str, Any]:
        # The envelope is read whenever present, even if no sub-parser matches later.
        context: dict[str, Any] = {}
        context.update(REQUEST_ID.extract(message) or {})
        context.update(SYSLOG_PREFIX.extract(message) or {})
        return context

    def strip_envelope(self, message: str) -> str:
        return SYSLOG_PREFIX.pattern.sub("", message, count=1)
