from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from gd_linreg.cli import app
from gd_linreg.tracing import RunTraceCollector

runner = CliRunner()


def test_no_arguments_prints_usage() -> None:
    result = runner.invoke(app, [])
    assert result.exit_code == 1
    assert "Invalid number of arguments" in result.output
    assert "log-every 1000" in result.output


def test_too_many_arguments_prints_usage(doubling_pairs_path: Path) -> None:
    result = runner.invoke(app, [str(doubling_pairs_path), "settings.txt", "extra.txt"])
    assert result.exit_code == 1
    assert "Invalid number of arguments" in result.output


def test_train_writes_log_lines_to_stdout(doubling_pairs_path: Path) -> None:
    result = runner.invoke(
        app, [str(doubling_pairs_path), "--iterations", "250", "--log-every", "100"]
    )
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert len(lines) == 3
    assert [line.split(",")[0] for line in lines] == [
        "iteration: 0",
        "iteration: 100",
        "iteration: 200",
    ]


def test_zero_iterations_logs_single_update(doubling_pairs_path: Path) -> None:
    result = runner.invoke(app, [str(doubling_pairs_path), "--iterations", "0"])
    assert result.exit_code == 0
    assert result.stdout == "iteration: 0, w: 0.000093, b: 0.000040\n"


def test_settings_file_output_goes_to_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    doubling_pairs_path: Path,
    settings_file: Callable[[list[str]], Path],
) -> None:
    monkeypatch.chdir(tmp_path)
    output = tmp_path / "train.log"
    settings = settings_file(["alpha 0.1", "iterations 5000", "log-every 1000", "output train.log"])

    result = runner.invoke(app, [str(doubling_pairs_path), str(settings)])

    assert result.exit_code == 0
    assert result.stdout == ""
    lines = output.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 6
    assert lines[-1].startswith("iteration: 5000, w: 2.0")


def test_unknown_setting_warns_and_continues(
    doubling_pairs_path: Path, settings_file: Callable[[list[str]], Path]
) -> None:
    settings = settings_file(["foo bar", "iterations 0"])

    result = runner.invoke(app, [str(doubling_pairs_path), str(settings)])

    assert result.exit_code == 0
    assert "Unknown key: foo" in result.output
    assert "iteration: 0, w: 0.000093, b: 0.000040" in result.output


def test_missing_pairs_file_exits_without_creating_output(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    settings_file: Callable[[list[str]], Path],
) -> None:
    monkeypatch.chdir(tmp_path)
    output = tmp_path / "train.log"
    settings = settings_file(["output train.log"])

    result = runner.invoke(app, [str(tmp_path / "no-such-pairs.txt"), str(settings)])

    assert result.exit_code == 1
    assert "no-such-pairs.txt" in result.output
    assert "Error opening pairs file" in result.output
    assert not output.exists()


def test_missing_settings_file_exits(doubling_pairs_path: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, [str(doubling_pairs_path), str(tmp_path / "nope.txt")])
    assert result.exit_code == 1
    assert "Error opening settings file" in result.output


def test_invalid_log_every_is_rejected(doubling_pairs_path: Path) -> None:
    result = runner.invoke(app, [str(doubling_pairs_path), "--log-every", "0"])
    assert result.exit_code == 1
    assert "log-every" in result.output
    assert "iteration:" not in result.output


def test_malformed_pairs_fail_unless_lenient(tmp_path: Path) -> None:
    pairs = tmp_path / "pairs.txt"
    pairs.write_text("1 2\n2 4\n3 six\n", encoding="utf-8")

    strict = runner.invoke(app, [str(pairs), "--iterations", "0"])
    lenient = runner.invoke(app, [str(pairs), "--iterations", "0", "--lenient"])

    assert strict.exit_code == 1
    assert "expected an integer target" in strict.output
    assert lenient.exit_code == 0
    assert lenient.stdout.startswith("iteration: 0, ")


def test_trace_is_written(tmp_path: Path, doubling_pairs_path: Path) -> None:
    trace_path = tmp_path / "trace.json"

    result = runner.invoke(
        app,
        [
            str(doubling_pairs_path),
            "--iterations",
            "20",
            "--log-every",
            "10",
            "--trace",
            str(trace_path),
        ],
    )

    assert result.exit_code == 0
    events = json.loads(trace_path.read_text(encoding="utf-8"))
    actions = [event["action"] for event in events]
    assert actions == [
        "samples_loaded",
        "settings_loaded",
        "progress",
        "progress",
        "progress",
        "train_finished",
    ]
    assert [event["iteration"] for event in events if event["action"] == "progress"] == [
        0,
        10,
        20,
    ]
    assert "cost" in events[2]["details"]


def test_verbose_reports_progress(doubling_pairs_path: Path) -> None:
    result = runner.invoke(app, [str(doubling_pairs_path), "--iterations", "0", "--verbose"])
    assert result.exit_code == 0
    assert "verbose:" in result.output
    assert "samples_loaded" in result.output


def test_unwritable_trace_path_reports_error(tmp_path: Path, doubling_pairs_path: Path) -> None:
    trace_dir = tmp_path / "trace-dir"
    trace_dir.mkdir()

    result = runner.invoke(
        app, [str(doubling_pairs_path), "--iterations", "0", "--trace", str(trace_dir)]
    )

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Error opening trace file" in result.output
    assert "trace-dir" in result.output


def test_default_run_keeps_no_trace_events(
    doubling_pairs_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    created: list[RunTraceCollector] = []

    class _RecordingCollector(RunTraceCollector):
        def __init__(self) -> None:
            super().__init__()
            created.append(self)

    monkeypatch.setattr("gd_linreg.cli.RunTraceCollector", _RecordingCollector)

    result = runner.invoke(
        app, [str(doubling_pairs_path), "--iterations", "5000", "--log-every", "1"]
    )

    assert result.exit_code == 0
    assert len(result.stdout.splitlines()) == 5001
    assert created == []


def test_trace_run_uses_one_collector(
    tmp_path: Path, doubling_pairs_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    created: list[RunTraceCollector] = []

    class _RecordingCollector(RunTraceCollector):
        def __init__(self) -> None:
            super().__init__()
            created.append(self)

    monkeypatch.setattr("gd_linreg.cli.RunTraceCollector", _RecordingCollector)

    result = runner.invoke(
        app, [str(doubling_pairs_path), "--iterations", "0", "--trace", str(tmp_path / "t.csv")]
    )

    assert result.exit_code == 0
    assert len(created) == 1
    assert [event["action"] for event in created[0].events()][-1] == "train_finished"


def test_output_file_open_failure_exits(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    doubling_pairs_path: Path,
    settings_file: Callable[[list[str]], Path],
) -> None:
    monkeypatch.chdir(tmp_path)
    settings = settings_file(["output missing-dir/train.log"])

    result = runner.invoke(app, [str(doubling_pairs_path), str(settings)])

    assert result.exit_code == 1
    assert "Error opening output file" in result.output
    assert "iteration:" not in result.output
