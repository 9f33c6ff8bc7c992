# tests/test_cli.py
"""
Tests for the metricline command-line interface (CLI).

Scope
-----
1.  **Command Registration**: `--help` lists every command.
2.  **Argument Validation**: Typer's `exists=True` check on the timeline file.
3.  **Operations**: each command runs the matching timeline operation on a
    small JSON document written to `tmp_path`.
4.  **Error Handling**: lookup and resampling failures exit with code 1.

We use `typer.testing.CliRunner` to invoke the app in-process.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
from typer.testing import CliRunner

from metricline.cli import app

EPOCH_S = int(datetime(2026, 1, 1, tzinfo=UTC).timestamp())


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    """Create a fresh CliRunner for each test."""
    return CliRunner()


@pytest.fixture  # type: ignore[misc]
def timeline_file(tmp_path: Path) -> Path:
    """A four-snapshot timeline with one redundant snapshot."""
    path = tmp_path / "timeline.json"
    doc = {
        "snapshots": [
            {"when": "2026-01-01T00:00:00Z", "values": {"a": 1, "b": 10, "mode": "warm"}},
            {"when": "2026-01-01T00:00:00.500Z", "values": {"a": 1, "b": 10, "mode": "warm"}},
            {"when": "2026-01-01T00:00:01.200Z", "values": {"a": 2, "b": 10, "mode": "warm"}},
            {"when": "2026-01-01T00:00:03Z", "values": {"a": 3, "b": 30, "mode": "hot"}},
        ]
    }
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_cli_help_lists_commands(runner: CliRunner) -> None:
    """Invoking --help should print usage and every command."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, f"Help failed: {result.output}"
    for command in ("report", "trim", "infer", "extract", "rate"):
        assert command in result.output


def test_report_fails_on_missing_file(runner: CliRunner) -> None:
    """Typer enforces `exists=True` for the timeline argument."""
    result = runner.invoke(app, ["report", "ghost.json"])
    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_report_renders_newest_snapshot(runner: CliRunner, timeline_file: Path) -> None:
    """`report` prints the markdown table of the last snapshot."""
    result = runner.invoke(app, ["report", str(timeline_file)])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "key | value at Thu Jan  1 00:00:03 UTC 2026"
    assert lines[1:] == ["----|------", "a | 3", "b | 30", "mode | hot"]


def test_report_keeps_long_values_on_one_line(runner: CliRunner, tmp_path: Path) -> None:
    """Values wider than the terminal are not wrapped across lines."""
    path = tmp_path / "long.json"
    doc = {"snapshots": [{"when": "2026-01-01T00:00:00Z", "values": {"k": "x" * 120}}]}
    path.write_text(json.dumps(doc), encoding="utf-8")
    result = runner.invoke(app, ["report", str(path)])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[2:] == ["k | " + "x" * 120]


def test_invalid_document_exits_1(runner: CliRunner, tmp_path: Path) -> None:
    """A malformed document is reported, not raised."""
    bad = tmp_path / "bad.json"
    bad.write_text('{"snapshots": [{"values": {}}]}', encoding="utf-8")
    result = runner.invoke(app, ["report", str(bad)])
    assert result.exit_code == 1
    assert "invalid timeline document" in result.output


def test_trim_writes_compacted_document(
    runner: CliRunner, timeline_file: Path, tmp_path: Path
) -> None:
    """`trim -o` drops the redundant snapshot and keeps the last one full."""
    out = tmp_path / "trimmed.json"
    result = runner.invoke(app, ["trim", str(timeline_file), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "4 -> 3" in result.output

    snaps = json.loads(out.read_text(encoding="utf-8"))["snapshots"]
    assert [s["values"] for s in snaps] == [
        {"a": 1, "b": 10, "mode": "warm"},
        {"a": 2},
        {"a": 3, "b": 30, "mode": "hot"},
    ]


def test_infer_found_and_not_found(runner: CliRunner, timeline_file: Path) -> None:
    """`infer` prints the value in effect, or exits 1 when there is none."""
    args = ["infer", str(timeline_file), "a", "--at"]
    result = runner.invoke(app, [*args, "2026-01-01T00:00:02Z"])
    assert result.exit_code == 0, result.output
    assert "a = 2" in result.output
    assert "snapshot 2" in result.output

    result = runner.invoke(app, [*args, "2025-12-31T00:00:00"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_extract_csv(runner: CliRunner, timeline_file: Path) -> None:
    """`extract --csv` emits one header plus one row per tick."""
    result = runner.invoke(
        app, ["extract", str(timeline_file), "-k", "a", "-k", "b", "-g", "1", "--csv"]
    )
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "tick,a,b",
        f"{EPOCH_S},1,10",
        f"{EPOCH_S + 1},2,10",
        f"{EPOCH_S + 3},3,30",
    ]


def test_extract_explicit_end_is_exclusive(runner: CliRunner, timeline_file: Path) -> None:
    """An explicit `--to` at the newest snapshot leaves its values out."""
    result = runner.invoke(
        app,
        ["extract", str(timeline_file), "-k", "a", "-g", "1", "--to", str(EPOCH_S + 3), "--csv"],
    )
    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[-1] == f"{EPOCH_S + 3},2"


def test_extract_table_and_errors(runner: CliRunner, timeline_file: Path) -> None:
    """The rich table renders; a non-numeric key exits 1 naming it."""
    result = runner.invoke(app, ["extract", str(timeline_file), "-k", "a", "-g", "1"])
    assert result.exit_code == 0, result.output
    assert "3 rows" in result.output

    result = runner.invoke(app, ["extract", str(timeline_file), "-k", "mode"])
    assert result.exit_code == 1
    assert "mode" in result.output and "not a number" in result.output


def test_rate_command(runner: CliRunner) -> None:
    """`rate` reads WHEN=VALUE pairs with WHEN in epoch seconds."""
    result = runner.invoke(app, ["rate", "1=1", "2=2", "5=4"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "0.75"


def test_rate_without_samples_is_zero(runner: CliRunner) -> None:
    """Zero or one sample yields a rate of 0."""
    result = runner.invoke(app, ["rate"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "0"
    result = runner.invoke(app, ["rate", "1=5"])
    assert result.output.strip() == "0"


def test_rate_rejects_malformed_sample(runner: CliRunner) -> None:
    """A sample without `=` is a usage error."""
    result = runner.invoke(app, ["rate", "12"])
    assert result.exit_code == 2
