"""Structured records produced by the dialect parsers.

Each dialect has a base record holding the fields shared by every line of
that dialect, and one variant per line sub-type holding only the fields that
sub-type produces. Lines no sub-parser could classify become the dialect's
``*Unknown`` variant, which keeps the original message verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, TypeVar


class LineType(str, Enum):
    """Classification tags assigned by the built-in sub-parsers."""

    # rails
    REQUEST = "request"
    PARAMETERS = "parameters"
    REDIRECT = "redirect"
    ACTIVE_JOB = "active_job"
    PROCESSING = "processing"
    COMPLETED = "completed"
    # sidekiq
    START = "start"
    DONE = "done"
    FAIL = "fail"

    UNKNOWN = "unknown"


def normalize_line_type(value: Any) -> str:
    """Map a sub-parser supplied tag onto LineType when it is a built-in one.

    Custom sub-parsers may use any tag; those are kept as plain strings.
    """
    if value is None:
        return LineType.UNKNOWN
    if isinstance(value, LineType):
        return value
    text = str(value)
    try:
        return LineType(text)
    except ValueError:
        return text


def line_type_tag(value: Any) -> str | None:
    """Plain string form of a line type (LineType members give their value)."""
    if value is None:
        return None
    return value.value if isinstance(value, Enum) else str(value)


def _empty_extra() -> Mapping[str, Any]:
    return MappingProxyType({})


def _freeze(value: Any) -> Any:
    """Read-only copy of nested containers: mappings become proxies, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True, slots=True, kw_only=True)
class LogRecord:
    """Base for every structured record.

    ``extra`` holds fields returned by custom sub-parsers that the record
    variant does not declare.
    """

    dialect: ClassVar[str] = ""

    line_type: str = LineType.UNKNOWN
    extra: Mapping[str, Any] = field(default_factory=_empty_extra, hash=False)

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            frozen = _freeze(value)
            if frozen is not value:
                object.__setattr__(self, f.name, frozen)

    @property
    def is_unknown(self) -> bool:
        return self.line_type == LineType.UNKNOWN

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Declared field names, excluding ``extra``."""
        return tuple(f.name for f in fields(cls) if f.name != "extra")

    def get(self, key: str, default: Any = None) -> Any:
        """Return a present field (declared or extra), else ``default``."""
        if key in self.field_names():
            value = getattr(self, key)
            return default if value is None else value
        return self.extra.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return only the fields that are present, plus the dialect tag.

        Nested values come back as plain dicts and lists. Declared fields and
        the ``dialect`` tag take precedence over ``extra`` keys of the same
        name; those stay reachable through ``extra``.
        """
        out: dict[str, Any] = {"dialect": self.dialect}
        for name in self.field_names():
            value = getattr(self, name)
            if value is None:
                continue
            out[name] = value.value if isinstance(value, Enum) else _thaw(value)
        for key, value in self.extra.items():
            out.setdefault(key, _thaw(value))
        return out


# --- rails -----------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class RailsLog(LogRecord):
    """Fields common to every web-request log line."""

    dialect: ClassVar[str] = "rails"

    request_id: str | None = None
    syslog_timestamp: str | None = None
    server: str | None = None
    process_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RailsRequest(RailsLog):
    """``Started GET "/path" for 1.2.3.4 at ...``"""

    http_method: str | None = None
    path: str | None = None
    ip_address: str | None = None
    request_timestamp: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RailsParameters(RailsLog):
    """``Parameters: {...}``"""

    params: Mapping[str, Any] | None = field(default=None, hash=False)


@dataclass(frozen=True, slots=True, kw_only=True)
class RailsRedirect(RailsLog):
    redirect_url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RailsActiveJob(RailsLog):
    """``[ActiveJob] Enqueued JobClass (Job ID: ...) to Adapter(queue)``"""

    job_class: str | None = None
    job_id: str | None = None
    queue: str | None = None
    arguments: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RailsProcessing(RailsLog):
    controller: str | None = None
    action: str | None = None
    format: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RailsCompleted(RailsLog):
    status_code: int | None = None
    duration_ms: float | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RailsUnknown(RailsLog):
    raw_message: str | None = None


RAILS_VARIANTS: Mapping[str, type[RailsLog]] = MappingProxyType(
    {
        LineType.REQUEST: RailsRequest,
        LineType.PARAMETERS: RailsParameters,
        LineType.REDIRECT: RailsRedirect,
        LineType.ACTIVE_JOB: RailsActiveJob,
        LineType.PROCESSING: RailsProcessing,
        LineType.COMPLETED: RailsCompleted,
        LineType.UNKNOWN: RailsUnknown,
    }
)


# --- sidekiq ---------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class SidekiqLog(LogRecord):
    """Fields common to every background-job log line."""

    dialect: ClassVar[str] = "sidekiq"

    timestamp: str | None = None
    pid: str | None = None
    tid: str | None = None
    job_class: str | None = None
    jid: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SidekiqStart(SidekiqLog):
    status: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SidekiqDone(SidekiqLog):
    status: str | None = None
    elapsed: float | None = None  # seconds

    @property
    def duration(self) -> float | None:
        return self.elapsed


@dataclass(frozen=True, slots=True, kw_only=True)
class SidekiqFail(SidekiqLog):
    status: str | None = None
    error_message: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SidekiqUnknown(SidekiqLog):
    raw_message: str | None = None


SIDEKIQ_VARIANTS: Mapping[str, type[SidekiqLog]] = MappingProxyType(
    {
        LineType.START: SidekiqStart,
        LineType.DONE: SidekiqDone,
        LineType.FAIL: SidekiqFail,
        LineType.UNKNOWN: SidekiqUnknown,
    }
)


R = TypeVar("R", bound=LogRecord)


def build_record(
    base: type[R],
    variants: Mapping[str, type[R]],
    values: Mapping[str, Any],
) -> R:
    """Build the record variant selected by ``values["line_type"]``.

    Line types without a dedicated variant (custom sub-parsers) use ``base``.
    Keys the chosen variant does not declare are kept in ``extra``.
    """
    line_type = normalize_line_type(values.get("line_type"))
    cls = variants.get(line_type, base)
    declared = set(cls.field_names())

    kwargs: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in values.items():
        if key in declared:
            kwargs[key] = value
        elif value is not None:
            extra[key] = value
    kwargs["line_type"] = line_type

    return cls(**kwargs, extra=extra)
