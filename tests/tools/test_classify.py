from __future__ import annotations

from pathlib import Path

import pytest

from mcp_log_dialects.resources.registry import dialect_catalog
from mcp_log_dialects.tools.classify import classify_log_file_impl, classify_message_impl
from mcp_log_dialects.tools.models import ClassifyResponse


@pytest.fixture
def base_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("LOG_DIALECTS_BASE_DIR", str(tmp_path))
    monkeypatch.delenv("LOG_DIALECTS_ENABLED", raising=False)
    monkeypatch.delenv("LOG_DIALECTS_HARD_LIMIT", raising=False)
    return tmp_path


def test_classify_message_rails(request_id: str) -> None:
    out = classify_message_impl(message=f"[{request_id}] Completed 500 Internal Server Error in 3ms")

    assert out["count"] == 1
    entry = out["entries"][0]
    assert entry["parser"] == "rails"
    assert entry["record"]["line_type"] == "completed"
    assert entry["record"]["status_code"] == 500
    assert out["counts"] == {"rails:completed": 1}


def test_classify_message_unparsed() -> None:
    out = classify_message_impl(message="nothing to see here")

    assert out["entries"][0]["record"] is None
    assert out["counts"] == {"unparsed": 1}


def test_classify_message_restricted_dialects(request_id: str) -> None:
    out = classify_message_impl(message=f"[{request_id}] Redirected to /x", dialects=["sidekiq"])

    assert out["entries"][0]["parser"] is None


@pytest.mark.asyncio
async def test_classify_log_file_relative_path(base_dir: Path, write_mixed_log) -> None:
    write_mixed_log(base_dir / "app.log")

    out = await classify_log_file_impl(log_path="app.log", line_types=["request", "done"])

    assert out["count"] == 2
    assert [e["record"]["line_type"] for e in out["entries"]] == ["request", "done"]
    assert all(e["message"] is None for e in out["entries"])


@pytest.mark.asyncio
async def test_classify_log_file_dialect_and_unparsed(base_dir: Path, write_mixed_log) -> None:
    write_mixed_log(base_dir / "app.log")

    rails = await classify_log_file_impl(log_path="app.log", dialects=["rails"], include_message=True)
    assert rails["count"] == 4
    assert {e["parser"] for e in rails["entries"]} == {"rails"}
    assert rails["entries"][0]["message"].endswith("+0000")

    everything = await classify_log_file_impl(log_path="app.log", include_unparsed=True)
    assert everything["count"] == 7
    assert everything["counts"]["unparsed"] == 1


@pytest.mark.asyncio
async def test_classify_log_file_limit_capped(
    base_dir: Path, write_mixed_log, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_mixed_log(base_dir / "app.log")
    monkeypatch.setenv("LOG_DIALECTS_HARD_LIMIT", "3")

    out = await classify_log_file_impl(log_path="app.log", limit=100)

    assert out["count"] == 3


@pytest.mark.asyncio
async def test_classify_log_file_rejects_escape(base_dir: Path) -> None:
    with pytest.raises(ValueError, match="escapes base dir"):
        await classify_log_file_impl(log_path="../outside.log")


@pytest.mark.asyncio
async def test_classify_log_file_rejects_bad_limit(base_dir: Path, write_mixed_log) -> None:
    write_mixed_log(base_dir / "app.log")

    with pytest.raises(ValueError, match="limit"):
        await classify_log_file_impl(log_path="app.log", limit=0)


def test_response_schema_and_catalog() -> None:
    schema = ClassifyResponse.model_json_schema()

    assert {"count", "counts", "entries"} <= set(schema["properties"])
    assert dialect_catalog()["sidekiq"] == ["start", "done", "fail"]
