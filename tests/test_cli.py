from __future__ import annotations

import json
from pathlib import Path

import pytest

from mcp_log_dialects.cli import main


def test_cli_prints_json_lines(
    tmp_path: Path, write_mixed_log, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "app.log"
    write_mixed_log(path)

    main([str(path), "--dialects", "sidekiq"])

    rows = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [row["record"]["line_type"] for row in rows] == ["start", "done"]
    assert "message" not in rows[0]


def test_cli_parsed_only_and_max(
    tmp_path: Path, write_mixed_log, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "app.log"
    write_mixed_log(path)

    main([str(path), "--parsed-only", "--max", "5", "--message"])

    rows = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert len(rows) == 5
    assert all(row["parser"] for row in rows)
    assert rows[0]["message"].startswith("Feb  4")


def test_cli_missing_file_exits(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "missing.log")])

    assert exc_info.value.code == 2
    assert "not found" in capsys.readouterr().err


def test_cli_rejects_unknown_dialect(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main([str(tmp_path / "app.log"), "--dialects", "nginx"])
