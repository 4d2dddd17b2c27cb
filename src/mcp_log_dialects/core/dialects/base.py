"""Parser interfaces and sub-parser resolution."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from ..errors import ConfigurationError
from ..models import LogRecord

ALL = "all"


class SubParser(Protocol):
    """Classifier for one line shape within a dialect.

    ``matches`` is a cheap pre-filter and must not raise. ``extract`` is only
    called after ``matches`` returned True; its result includes ``line_type``
    when the line was fully classified.
    """

    def matches(self, message: str) -> bool:
        ...

    def extract(self, message: str, context: Mapping[str, Any]) -> Mapping[str, Any]:
        ...


class LogParser(Protocol):
    """Dialect-level parser interface: return a record if the line belongs to it."""

    def matches(self, message: str) -> bool:
        ...

    def extract(self, message: str) -> LogRecord | None:
        ...


def has_capability(obj: object) -> bool:
    """Return True if obj exposes callable ``matches`` and ``extract``."""
    return callable(getattr(obj, "matches", None)) and callable(getattr(obj, "extract", None))


def resolve_sub_parsers(
    specs: Iterable[Any],
    catalog: Mapping[str, SubParser],
) -> tuple[SubParser, ...]:
    """Resolve names, the ``all`` sentinel and custom objects into sub-parsers.

    No specs means every built-in in catalog order. The result is
    de-duplicated by identity, keeping the first occurrence.
    """
    specs = list(specs)
    if not specs:
        return tuple(catalog.values())

    resolved: list[SubParser] = []
    for spec in specs:
        if isinstance(spec, str):
            if spec == ALL:
                resolved.extend(catalog.values())
                continue
            parser = catalog.get(spec)
            if parser is None:
                available = ", ".join(catalog)
                raise ConfigurationError(f"Unknown sub-parser: {spec!r}. Available: {available}")
            resolved.append(parser)
        elif has_capability(spec):
            resolved.append(spec)
        else:
            raise ConfigurationError(
                f"Sub-parser {spec!r} must provide matches(message) and "
                "extract(message, context)"
            )

    seen: set[int] = set()
    unique: list[SubParser] = []
    for parser in resolved:
        if id(parser) in seen:
            continue
        seen.add(id(parser))
        unique.append(parser)
    return tuple(unique)
