"""Log loading and classification utilities.

This module is the main integration point that reads local log files and
classifies each line through a parser registry.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import aclosing, asynccontextmanager
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .registry import ParserRegistry, default_registry
from .results import ClassificationSet, ClassifiedLine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


def classify_line(registry: ParserRegistry, line_no: int, line: str) -> ClassifiedLine:
    """Dispatch one line and wrap the outcome."""
    record, name = registry.dispatch(line)
    return ClassifiedLine(line_no=line_no, message=line, record=record, parser_name=name)


def _normalize_filter(values: Iterable[str] | None, *, what: str) -> set[str] | None:
    if values is None:
        return None
    out = {v.strip().lower() for v in values if v and v.strip()}
    if not out:
        raise ValueError(f"{what} filter must contain at least one non-empty value")
    return out


def classify_lines(
    lines: Iterable[str],
    *,
    registry: ParserRegistry | None = None,
    start: int = 1,
) -> ClassificationSet:
    """Classify in-memory lines (no filtering)."""
    if registry is None:
        registry = default_registry()
    return ClassificationSet(
        classify_line(registry, line_no, line.rstrip("\r\n"))
        for line_no, line in enumerate(lines, start=start)
    )


async def iter_classified(
    log_path: str | Path,
    *,
    registry: ParserRegistry | None = None,
    contains: str | None = None,
    dialects: Iterable[str] | None = None,
    line_types: Iterable[str] | None = None,
    include_unparsed: bool = True,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[ClassifiedLine]:
    """Yield classified lines after optional filtering.

    ``dialects`` and ``line_types`` only keep parsed lines; unparsed lines are
    yielded when neither is set and ``include_unparsed`` is true.
    """
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")

    allowed_dialects = _normalize_filter(dialects, what="dialects")
    allowed_types = _normalize_filter(line_types, what="line_types")
    if registry is None:
        registry = default_registry()

    def keep(item: ClassifiedLine) -> bool:
        if not item.parsed:
            return include_unparsed and allowed_dialects is None and allowed_types is None
        if allowed_dialects is not None and item.dialect not in allowed_dialects:
            return False
        if allowed_types is not None and item.line_type not in allowed_types:
            return False
        return True

    seen = 0
    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        async for line_no, line in _enumerate_async(f, start=1):
            line = line.rstrip("\r\n")
            if not line:
                continue
            if contains is not None and contains not in line:
                continue
            seen += 1
            item = classify_line(registry, line_no, line)
            if keep(item):
                yield item

    logger.debug("Classified %d lines from %s", seen, path)


async def classify_file(
    log_path: str | Path,
    *,
    limit: int | None = None,
    **iter_kwargs,
) -> ClassificationSet:
    """Collect iter_classified into a ClassificationSet, stopping at ``limit``."""
    if limit is not None and limit <= 0:
        raise ValueError("limit must be > 0")

    lines: list[ClassifiedLine] = []
    async with aclosing(iter_classified(log_path, **iter_kwargs)) as items:
        async for item in items:
            lines.append(item)
            if limit is not None and len(lines) >= limit:
                break
    return ClassificationSet(lines)


async def _enumerate_async(iterable, start: int = 0):
    """Async enumerate helper for async iterators."""
    index = start
    async for item in iterable:
        yield index, item
        index += 1
