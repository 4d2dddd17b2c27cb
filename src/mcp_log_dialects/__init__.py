"""Classify Rails and Sidekiq log lines into structured records."""

from __future__ import annotations

from .core import (
    ALL,
    ClassificationSet,
    ClassifiedLine,
    ConfigurationError,
    DialectParser,
    LineType,
    LogRecord,
    ParserRegistry,
    RailsParser,
    SidekiqParser,
    default_registry,
)

__all__ = [
    "ALL",
    "ClassificationSet",
    "ClassifiedLine",
    "ConfigurationError",
    "DialectParser",
    "LineType",
    "LogRecord",
    "ParserRegistry",
    "RailsParser",
    "SidekiqParser",
    "default_registry",
]
