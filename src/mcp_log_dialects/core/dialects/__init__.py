"""Log dialect parsers.

Each dialect is a composite parser that classifies its lines with an ordered
list of sub-parsers.
"""

from __future__ import annotations

from .base import ALL, LogParser, SubParser, has_capability, resolve_sub_parsers
from .composite import DialectParser
from .rails import RailsParser
from .sidekiq import SidekiqParser

__all__ = [
    "ALL",
    "DialectParser",
    "LogParser",
    "RailsParser",
    "SidekiqParser",
    "SubParser",
    "has_capability",
    "resolve_sub_parsers",
]
