from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from mcp_log_dialects.core.dialects import ALL, RailsParser
from mcp_log_dialects.core.dialects.rails import parse_params
from mcp_log_dialects.core.errors import ConfigurationError
from mcp_log_dialects.core.models import (
    LineType,
    RailsActiveJob,
    RailsCompleted,
    RailsLog,
    RailsParameters,
    RailsProcessing,
    RailsRedirect,
    RailsRequest,
    RailsUnknown,
)

RID = "c3784123-8ce1-4b7e-8583-3e6f61ef5676"


class KeywordSubParser:
    """Custom sub-parser used to exercise the extension path."""

    def __init__(self, keyword: str, fields: Mapping[str, Any]) -> None:
        self.keyword = keyword
        self.fields = dict(fields)

    def matches(self, message: str) -> bool:
        return self.keyword in message

    def extract(self, message: str, context: Mapping[str, Any]) -> dict[str, Any]:
        return dict(self.fields)


def test_matches_request_uuid() -> None:
    parser = RailsParser()
    assert parser.matches(f'[{RID}] Started GET "/path" for 1.2.3.4 at 2026-02-04')


def test_does_not_match_sidekiq_lines() -> None:
    message = "2026-02-04T20:46:15.201Z pid=4022623 tid=c8kxf7 class=Job jid=abc123 INFO: done"
    assert RailsParser().matches(message) is False
    assert RailsParser().extract(message) is None


def test_available_sub_parsers() -> None:
    assert RailsParser.available_sub_parsers() == (
        "request",
        "parameters",
        "redirect",
        "active_job",
        "processing",
        "completed",
    )


def test_request_line_with_syslog_envelope(syslog_prefix: str) -> None:
    message = (
        f'{syslog_prefix}[{RID}] Started GET "/shipments/443155" '
        "for 45.77.120.91 at 2026-02-04 22:37:47 +0000"
    )
    record = RailsParser().extract(message)

    assert isinstance(record, RailsRequest)
    assert record.dialect == "rails"
    assert record.line_type == LineType.REQUEST
    assert record.request_id == RID
    assert record.http_method == "GET"
    assert record.path == "/shipments/443155"
    assert record.ip_address == "45.77.120.91"
    assert record.request_timestamp == "2026-02-04 22:37:47 +0000"
    assert record.server == "ip-10-15-1-216"
    assert record.process_id == "1030829"
    assert record.syslog_timestamp == "Feb  4 22:37:47"


def test_request_line_without_envelope_has_no_server() -> None:
    record = RailsParser().extract(f'[{RID}] Started POST "/orders" for 10.0.0.1 at 2026-02-04')

    assert isinstance(record, RailsRequest)
    assert record.http_method == "POST"
    assert record.server is None
    assert "server" not in record.to_dict()


def test_parameters_line_parsed_into_dict() -> None:
    record = RailsParser().extract(f'[{RID}] Parameters: {{"id"=>"123", "name"=>"test"}}')

    assert isinstance(record, RailsParameters)
    assert record.line_type == LineType.PARAMETERS
    assert record.params == {"id": "123", "name": "test"}


def test_parameters_fallback_keeps_raw_text() -> None:
    record = RailsParser().extract(f'[{RID}] Parameters: {{"file"=>#<ActionDispatch::Http::UploadedFile>}}')

    assert isinstance(record, RailsParameters)
    assert record.params == {"raw": '{"file"=>#<ActionDispatch::Http::UploadedFile>}'}


def test_parse_params_symbols_nil_and_nesting() -> None:
    parsed = parse_params('{:id=>1, "flag"=>nil, "user"=>{"name"=>"x", "role"=>:admin}}')
    assert parsed == {"id": 1, "flag": None, "user": {"name": "x", "role": "admin"}}


def test_redirect_line() -> None:
    record = RailsParser().extract(f"[{RID}] Redirected to https://example.com/path ")

    assert isinstance(record, RailsRedirect)
    assert record.redirect_url == "https://example.com/path"


def test_active_job_line_with_arguments() -> None:
    message = f'[{RID}] [ActiveJob] Enqueued MyJob (Job ID: job-123) to Sidekiq(default) with arguments: "arg1"'
    record = RailsParser().extract(message)

    assert isinstance(record, RailsActiveJob)
    assert record.job_class == "MyJob"
    assert record.job_id == "job-123"
    assert record.queue == "default"
    assert record.arguments == '"arg1"'


def test_active_job_line_without_arguments() -> None:
    message = f"[{RID}] [ActiveJob] Enqueued Mailers::Digest (Job ID: 7f3a) to Sidekiq(mailers)"
    record = RailsParser().extract(message)

    assert isinstance(record, RailsActiveJob)
    assert record.job_class == "Mailers::Digest"
    assert record.arguments is None
    assert "arguments" not in record.to_dict()


def test_processing_line() -> None:
    record = RailsParser().extract(f"[{RID}] Processing by Admin::ShipmentsController#show as */*")

    assert isinstance(record, RailsProcessing)
    assert record.controller == "Admin::ShipmentsController"
    assert record.action == "show"
    assert record.format == "*/*"


@pytest.mark.parametrize(
    ("tail", "status", "duration_ms"),
    [
        ("Completed 200 OK in 48ms (Views: 20.1ms | ActiveRecord: 9.3ms)", 200, 48.0),
        ("Completed 404 Not Found in 12.5ms", 404, 12.5),
        ("Completed 302 Found in 2s", 302, 2000.0),
    ],
)
def test_completed_line(tail: str, status: int, duration_ms: float) -> None:
    record = RailsParser().extract(f"[{RID}] {tail}")

    assert isinstance(record, RailsCompleted)
    assert record.status_code == status
    assert record.duration_ms == pytest.approx(duration_ms)


def test_unknown_line_keeps_original_message() -> None:
    message = f"[{RID}] Some random log message"
    record = RailsParser().extract(message)

    assert isinstance(record, RailsUnknown)
    assert record.line_type == LineType.UNKNOWN
    assert record.request_id == RID
    assert record.raw_message == message


def test_unknown_line_keeps_envelope_in_raw_message(syslog_prefix: str) -> None:
    message = f"{syslog_prefix}[{RID}] Completed the nightly migration"
    record = RailsParser().extract(message)

    assert isinstance(record, RailsUnknown)
    assert record.raw_message == message
    assert record.server == "ip-10-15-1-216"
    assert record.process_id == "1030829"


def test_specific_sub_parsers_only() -> None:
    parser = RailsParser("request", "parameters")

    assert len(parser.sub_parsers) == 2
    assert parser.extract(f'[{RID}] Started GET "/path" for 1.2.3.4 at 2026-02-04').line_type == LineType.REQUEST
    assert parser.extract(f"[{RID}] Redirected to https://example.com").line_type == LineType.UNKNOWN


def test_all_plus_custom_sub_parser() -> None:
    custom = KeywordSubParser("CUSTOM:", {"line_type": "custom", "custom_field": "value"})
    parser = RailsParser(ALL, custom)

    assert len(parser.sub_parsers) == 7
    record = parser.extract(f"[{RID}] CUSTOM: my message")
    assert type(record) is RailsLog
    assert record.line_type == "custom"
    assert record.request_id == RID
    assert record.get("custom_field") == "value"
    assert record.to_dict()["custom_field"] == "value"


def test_sub_parser_list_is_deduplicated_and_immutable() -> None:
    parser = RailsParser("request", "request", ALL)

    assert len(parser.sub_parsers) == 6
    assert parser.sub_parsers[0] is RailsParser.built_in_sub_parsers["request"]
    assert isinstance(parser.sub_parsers, tuple)


def test_first_match_wins_and_order_matters() -> None:
    first = KeywordSubParser("BOTH", {"line_type": "first"})
    second = KeywordSubParser("BOTH", {"line_type": "second"})
    message = f"[{RID}] BOTH match"

    assert RailsParser(first, second).extract(message).line_type == "first"
    assert RailsParser(second, first).extract(message).line_type == "second"


def test_result_without_line_type_falls_through() -> None:
    partial = KeywordSubParser("Redirected", {"note": "looked but gave up"})
    record = RailsParser(partial, "redirect").extract(f"[{RID}] Redirected to https://example.com")

    assert isinstance(record, RailsRedirect)
    assert record.get("note") is None


def test_context_wins_over_sub_parser_fields() -> None:
    clash = KeywordSubParser("CLASH", {"line_type": "custom", "request_id": "other"})
    record = RailsParser(clash).extract(f"[{RID}] CLASH")

    assert record.request_id == RID


def test_unknown_sub_parser_name_raises() -> None:
    with pytest.raises(ConfigurationError, match="Unknown sub-parser") as exc_info:
        RailsParser("unknown_parser")
    assert "request, parameters, redirect, active_job, processing, completed" in str(exc_info.value)


def test_invalid_custom_sub_parser_raises() -> None:
    class MatchesOnly:
        def matches(self, message: str) -> bool:
            return True

    with pytest.raises(ConfigurationError, match="must provide"):
        RailsParser(object())
    with pytest.raises(ValueError):
        RailsParser(MatchesOnly())


def test_default_is_shared_singleton() -> None:
    assert RailsParser.default() is RailsParser.default()
    record = RailsParser.default().extract(f"[{RID}] Redirected to https://example.com")
    assert record.line_type == LineType.REDIRECT


def test_parsing_is_deterministic(syslog_prefix: str) -> None:
    parser = RailsParser()
    message = f'{syslog_prefix}[{RID}] Parameters: {{"id"=>"1", "tags"=>["a", "b"]}}'

    assert parser.extract(message) == parser.extract(message)
    assert parser.extract(message).to_dict() == parser.extract(message).to_dict()


def test_returned_records_cannot_be_changed_and_hash() -> None:
    params = RailsParser().extract(f'[{RID}] Parameters: {{"id"=>"1"}}')
    redirect = RailsParser().extract(f"[{RID}] Redirected to /x")

    with pytest.raises(TypeError):
        params.params["id"] = "2"
    assert params.params["id"] == "1"
    assert hash(redirect) == hash(RailsParser().extract(f"[{RID}] Redirected to /x"))
