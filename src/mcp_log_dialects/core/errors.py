"""Error types raised by the parsing core."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a parser or registry is built from an invalid specification.

    Only raised at construction or registration time, never while matching,
    extracting or dispatching a message.
    """
