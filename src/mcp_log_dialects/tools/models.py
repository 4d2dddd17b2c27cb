"""Response models for the MCP tools."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ..core.results import ClassificationSet, ClassifiedLine


class ClassifiedEntry(BaseModel):
    line_no: int = Field(description="1-based line number in the source (1 for single messages).")
    parser: str | None = Field(default=None, description="Name of the parser that produced the record.")
    record: dict[str, Any] | None = Field(
        default=None, description="Present fields of the structured record; null when unparsed."
    )
    message: str | None = Field(default=None, description="Original line, when requested.")

    @classmethod
    def from_line(cls, line: ClassifiedLine, *, include_message: bool) -> ClassifiedEntry:
        d = line.to_dict(include_message=include_message)
        record = d.get("record")
        return cls(
            line_no=line.line_no,
            parser=line.parser_name,
            record=record if isinstance(record, dict) else None,
            message=d.get("message"),
        )


class ClassifyResponse(BaseModel):
    count: int = Field(description="Number of entries returned.")
    counts: dict[str, int] = Field(
        default_factory=dict, description="Entries per dialect:line_type, plus 'unparsed'."
    )
    entries: list[ClassifiedEntry] = Field(default_factory=list)

    @classmethod
    def from_set(cls, lines: ClassificationSet, *, include_message: bool) -> ClassifyResponse:
        return cls(
            count=len(lines),
            counts=lines.counts(),
            entries=[ClassifiedEntry.from_line(line, include_message=include_message) for line in lines],
        )
