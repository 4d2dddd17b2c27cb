"""Labeled regex field extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldPattern:
    """A labeled pattern whose named groups become record fields."""

    label: str
    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, label: str, regex: str, flags: int = 0) -> FieldPattern:
        """Build a FieldPattern from a regex string."""
        return cls(label=label, pattern=re.compile(regex, flags))

    @property
    def slots(self) -> tuple[str, ...]:
        """Names of the capture groups this pattern can fill."""
        return tuple(self.pattern.groupindex)

    def matches(self, message: str) -> bool:
        """Return True if the pattern occurs anywhere in the message."""
        return self.pattern.search(message) is not None

    def extract(self, message: str) -> dict[str, str] | None:
        """Return named captures, or None if the pattern does not match.

        Optional groups that did not participate in the match are left out
        of the mapping rather than reported as empty strings.
        """
        m = self.pattern.search(message)
        if m is None:
            return None
        return {k: v for k, v in m.groupdict().items() if v is not None}
