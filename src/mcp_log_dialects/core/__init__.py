"""Pure parsing core: dialect parsers, registry and records."""

from __future__ import annotations

from .dialects import ALL, DialectParser, RailsParser, SidekiqParser, SubParser
from .errors import ConfigurationError
from .fields import FieldPattern
from .models import LineType, LogRecord
from .registry import ParserRegistry, default_parsers, default_registry
from .results import ClassificationSet, ClassifiedLine

__all__ = [
    "ALL",
    "ClassificationSet",
    "ClassifiedLine",
    "ConfigurationError",
    "DialectParser",
    "FieldPattern",
    "LineType",
    "LogRecord",
    "ParserRegistry",
    "RailsParser",
    "SidekiqParser",
    "SubParser",
    "default_parsers",
    "default_registry",
]
