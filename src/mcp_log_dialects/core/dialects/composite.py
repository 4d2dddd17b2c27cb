"""Composite dialect parser: ordered sub-parser dispatch."""

from __future__ import annotations

import functools
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar

from ..models import LineType, LogRecord, build_record
from .base import SubParser, resolve_sub_parsers


class DialectParser:
    """Classify lines of one dialect with an ordered list of sub-parsers.

    Subclasses provide the dialect-level ``matches`` test, the shared context
    extraction and the record types. Construction accepts built-in sub-parser
    names, the ``"all"`` sentinel and custom sub-parser objects, in any mix:

        RailsParser()                       # every built-in
        RailsParser("request", "redirect")  # only these, in this order
        RailsParser("all", MySubParser())   # built-ins plus a custom one

    The sub-parser order is fixed at construction; the first sub-parser whose
    result carries ``line_type`` wins.
    """

    parser_name: ClassVar[str] = ""
    built_in_sub_parsers: ClassVar[Mapping[str, SubParser]] = MappingProxyType({})
    record_type: ClassVar[type[LogRecord]] = LogRecord
    record_variants: ClassVar[Mapping[str, type[LogRecord]]] = MappingProxyType({})

    __slots__ = ("_sub_parsers",)

    def __init__(self, *sub_parsers: str | SubParser) -> None:
        self._sub_parsers = resolve_sub_parsers(sub_parsers, self.built_in_sub_parsers)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sub_parsers={len(self._sub_parsers)})"

    @property
    def sub_parsers(self) -> tuple[SubParser, ...]:
        return self._sub_parsers

    @classmethod
    def available_sub_parsers(cls) -> tuple[str, ...]:
        """Names of the built-in sub-parsers, in default order."""
        return tuple(cls.built_in_sub_parsers)

    @classmethod
    @functools.cache
    def default(cls) -> DialectParser:
        """Shared instance using the default sub-parser set."""
        return cls()

    def matches(self, message: str) -> bool:
        raise NotImplementedError

    def extract_context(self, message: str) -> dict[str, Any] | None:
        """Fields shared by every line of the dialect; None aborts extraction."""
        return {}

    def strip_envelope(self, message: str) -> str:
        """Return the payload handed to sub-parsers."""
        return message

    def classify(self, payload: str, context: Mapping[str, Any]) -> dict[str, Any] | None:
        """Return the first fully classified sub-parser result, if any."""
        for sub in self._sub_parsers:
            if not sub.matches(payload):
                continue
            result = sub.extract(payload, context)
            if result and result.get("line_type"):
                return dict(result)
        return None

    def extract(self, message: str) -> LogRecord | None:
        """Parse a message into a record, or None if the dialect does not apply."""
        if not self.matches(message):
            return None

        context = self.extract_context(message)
        if context is None:
            return None

        payload = self.strip_envelope(message)
        values = self.classify(payload, MappingProxyType(context))
        if values is None:
            values = {"line_type": LineType.UNKNOWN, "raw_message": message}

        # Dialect-common context wins over same-named sub-parser fields.
        values.update(context)
        return build_record(self.record_type, self.record_variants, values)
