from __future__ import annotations

from mcp_log_dialects.core.fields import FieldPattern


def test_extract_returns_named_captures() -> None:
    pattern = FieldPattern.compile("kv", r"user=(?P<user>\w+)\s+id=(?P<id>\d+)")
    assert pattern.extract("login user=alice id=42 ok") == {"user": "alice", "id": "42"}


def test_extract_no_match_returns_none() -> None:
    pattern = FieldPattern.compile("kv", r"user=(?P<user>\w+)")
    assert pattern.extract("nothing here") is None
    assert pattern.matches("nothing here") is False


def test_optional_group_is_absent_not_empty() -> None:
    pattern = FieldPattern.compile("opt", r"job=(?P<job>\w+)(?:\s+args=(?P<args>.+))?$")

    assert pattern.extract("job=Mailer") == {"job": "Mailer"}
    assert pattern.extract("job=Mailer args=[1, 2]") == {"job": "Mailer", "args": "[1, 2]"}


def test_slots_lists_group_names() -> None:
    pattern = FieldPattern.compile("kv", r"(?P<a>\w)=(?P<b>\w)")
    assert pattern.slots == ("a", "b")
    assert pattern.label == "kv"
