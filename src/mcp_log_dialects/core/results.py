"""Classified lines and helpers for filtering and grouping them."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, overload

from .models import LogRecord, line_type_tag


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    """One input line plus the record (if any) a registry produced for it."""

    line_no: int
    message: str
    record: Any | None = None
    parser_name: str | None = None

    @property
    def parsed(self) -> bool:
        return self.record is not None

    @property
    def dialect(self) -> str | None:
        """Dialect tag of the record, falling back to the parser name."""
        if self.record is None:
            return None
        return getattr(self.record, "dialect", None) or self.parser_name

    @property
    def line_type(self) -> str | None:
        if self.record is None:
            return None
        return getattr(self.record, "line_type", None)

    def to_dict(self, *, include_message: bool = True) -> dict[str, Any]:
        """JSON-friendly view of the line."""
        d: dict[str, Any] = {"line_no": self.line_no, "parser": self.parser_name}
        if include_message:
            d["message"] = self.message
        if isinstance(self.record, LogRecord):
            d["record"] = self.record.to_dict()
        elif self.record is not None:
            d["record"] = repr(self.record)
        return d


class ClassificationSet(Sequence[ClassifiedLine]):
    """An ordered collection of classified lines."""

    def __init__(self, lines: Iterable[ClassifiedLine] = ()) -> None:
        self._lines: tuple[ClassifiedLine, ...] = tuple(lines)

    @overload
    def __getitem__(self, index: int) -> ClassifiedLine: ...

    @overload
    def __getitem__(self, index: slice) -> ClassificationSet: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ClassificationSet(self._lines[index])
        return self._lines[index]

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[ClassifiedLine]:
        return iter(self._lines)

    def __repr__(self) -> str:
        return f"ClassificationSet({len(self._lines)} lines)"

    def parsed(self) -> ClassificationSet:
        return ClassificationSet(line for line in self._lines if line.parsed)

    def unparsed(self) -> ClassificationSet:
        return ClassificationSet(line for line in self._lines if not line.parsed)

    def by_dialect(self, dialect: str) -> ClassificationSet:
        return ClassificationSet(line for line in self._lines if line.dialect == dialect)

    def by_line_type(self, line_type: str) -> ClassificationSet:
        return ClassificationSet(line for line in self._lines if line.line_type == line_type)

    def _group_by(self, key: str) -> dict[str, list[ClassifiedLine]]:
        groups: dict[str, list[ClassifiedLine]] = {}
        for line in self._lines:
            value = getattr(line.record, key, None)
            if value:
                groups.setdefault(value, []).append(line)
        return groups

    def group_by_request(self) -> dict[str, list[ClassifiedLine]]:
        """Group rails lines by request id, in first-seen order."""
        return self._group_by("request_id")

    def group_by_job(self) -> dict[str, list[ClassifiedLine]]:
        """Group sidekiq lines by job id, in first-seen order."""
        return self._group_by("jid")

    def counts(self) -> dict[str, int]:
        """Number of lines per ``dialect:line_type`` (``unparsed`` for the rest)."""
        c: Counter[str] = Counter()
        for line in self._lines:
            if line.parsed:
                c[f"{line.dialect}:{line_type_tag(line.line_type)}"] += 1
            else:
                c["unparsed"] += 1
        return dict(c)
