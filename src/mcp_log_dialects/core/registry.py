"""Ordered registry of dialect parsers.

The registry is the single entry point for whole-message classification:
``dispatch`` hands a message to the first parser that claims it and reports
which parser produced the record. Mutating methods are meant for setup, before
the registry is shared between threads.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from .config import enabled_dialects
from .dialects import DialectParser, LogParser, RailsParser, SidekiqParser, has_capability
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DIALECTS: Mapping[str, type[DialectParser]] = MappingProxyType(
    {
        RailsParser.parser_name: RailsParser,
        SidekiqParser.parser_name: SidekiqParser,
    }
)

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def derive_parser_name(parser: object) -> str:
    """Return ``parser_name`` if supplied, else a name derived from the class.

    ``ShipmentAuditParser`` becomes ``shipment_audit``.
    """
    name = getattr(parser, "parser_name", None)
    if callable(name):
        name = name()
    if isinstance(name, str) and name:
        return name

    cls_name = parser.__name__ if isinstance(parser, type) else type(parser).__name__
    if cls_name.endswith("Parser") and cls_name != "Parser":
        cls_name = cls_name[: -len("Parser")]
    return _CAMEL_BOUNDARY.sub(r"\1_\2", cls_name).lower()


def _validate_parser(parser: object) -> None:
    if not has_capability(parser):
        raise ConfigurationError(
            f"Parser {parser!r} must provide matches(message) and extract(message)"
        )


class ParserRegistry:
    """Ordered, identity-deduplicated collection of dialect parsers."""

    def __init__(self) -> None:
        self._parsers: list[LogParser] = []

    def __len__(self) -> int:
        return len(self._parsers)

    def __iter__(self) -> Iterator[LogParser]:
        return iter(tuple(self._parsers))

    def __contains__(self, parser: object) -> bool:
        return self._index(parser) is not None

    def __repr__(self) -> str:
        names = ", ".join(derive_parser_name(p) for p in self._parsers)
        return f"ParserRegistry([{names}])"

    def _index(self, parser: object) -> int | None:
        for i, existing in enumerate(self._parsers):
            if existing is parser:
                return i
        return None

    def _remove(self, parser: object) -> None:
        i = self._index(parser)
        if i is not None:
            del self._parsers[i]

    def register(self, *parsers: LogParser) -> ParserRegistry:
        """Append parsers not already present (lowest priority)."""
        for parser in parsers:
            _validate_parser(parser)
            if parser not in self:
                self._parsers.append(parser)
        return self

    def prepend(self, *parsers: LogParser) -> ParserRegistry:
        """Move parsers to the front, keeping the order they were given in."""
        for parser in reversed(parsers):
            _validate_parser(parser)
            self._remove(parser)
            self._parsers.insert(0, parser)
        return self

    def insert(self, index: int, parser: LogParser) -> ParserRegistry:
        """Insert a parser at ``index``, dropping any earlier occurrence first."""
        _validate_parser(parser)
        self._remove(parser)
        self._parsers.insert(index, parser)
        return self

    def unregister(self, parser: LogParser) -> ParserRegistry:
        self._remove(parser)
        return self

    def clear(self) -> ParserRegistry:
        self._parsers.clear()
        return self

    def list(self) -> Sequence[LogParser]:
        """Return a copy of the registered parsers in priority order."""
        return self._parsers.copy()

    def dispatch(self, message: str | None) -> tuple[Any | None, str | None]:
        """Classify a message with the first parser that produces a record.

        Returns ``(record, parser_name)``, or ``(None, None)`` when the message
        is empty or no parser produced a record. A parser that raises is
        logged and skipped.
        """
        if not message:
            return None, None

        for parser in tuple(self._parsers):
            try:
                if not parser.matches(message):
                    continue
                record = parser.extract(message)
                if record is None:
                    continue
                return record, derive_parser_name(parser)
            except Exception:
                logger.warning(
                    "Parser %s failed; trying next parser", type(parser).__name__, exc_info=True
                )

        return None, None


def default_parsers(names: Sequence[str] | None = None) -> list[DialectParser]:
    """Build the built-in dialect parsers, by default those enabled in the environment."""
    names = enabled_dialects() if names is None else names
    parsers: list[DialectParser] = []
    for name in names:
        cls = DIALECTS.get(name)
        if cls is None:
            available = ", ".join(DIALECTS)
            raise ConfigurationError(f"Unknown dialect: {name!r}. Available: {available}")
        parsers.append(cls())
    return parsers


def default_registry(names: Sequence[str] | None = None) -> ParserRegistry:
    """Registry holding the default dialect parsers (first match wins)."""
    return ParserRegistry().register(*default_parsers(names))
