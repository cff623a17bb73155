# tests/test_cli.py
from __future__ import annotations

import json
import shlex
import sys
from pathlib import Path

import pytest

from stampede.cli import run_cli


def _py(code: str) -> str:
    return f"{shlex.quote(sys.executable)} -c {shlex.quote(code)}"


def test_runs_positional_tasks_and_reports(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_cli(
        [
            "--no-color",
            f"[first] {_py('print(1)')}",
            f"[second] {_py('print(2)')}",
        ]
    )
    out = capsys.readouterr().out.splitlines()

    assert code == 0
    assert "first  | 1" in out
    assert "second | 2" in out
    assert "Tasks finished: 2 / 2 succeeded, 0 failed" in out
    assert "All tasks completed successfully!" in out


def test_failure_returns_1(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_cli(["--no-color", f"[fail] {_py('raise SystemExit(3)')}"])
    captured = capsys.readouterr()

    assert code == 1
    assert "Tasks finished: 0 / 1 succeeded, 1 failed" in captured.out
    assert "Failed tasks: fail" in captured.out
    assert "fail | Error: exit status 3" in captured.err


def test_no_tasks_returns_1(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_cli([])
    captured = capsys.readouterr()

    assert code == 1
    assert "No tasks provided." in captured.err
    assert "usage:" in captured.err
    assert captured.out == ""


def test_comment_only_file_aborts_before_scheduling(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    tasks = tmp_path / "tasks.txt"
    tasks.write_text("# nothing here\n\n   \n# still nothing\n", encoding="utf-8")

    code = run_cli(["--from", str(tasks)])
    captured = capsys.readouterr()

    assert code == 1
    assert "No tasks provided." in captured.err
    assert "Running:" not in captured.out


def test_from_file_runs_tasks(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    tasks = tmp_path / "tasks.txt"
    tasks.write_text(
        f"# checks\n[one] {_py('print(1)')}\n{_py('print(2)')}\n",
        encoding="utf-8",
    )

    code = run_cli(["-f", str(tasks), "--quiet", "--no-color"])
    out = capsys.readouterr().out.splitlines()

    label = Path(sys.executable).stem
    assert code == 0
    assert sorted(out) == sorted(["one" + " " * (len(label) - 3) + " | 1", f"{label} | 2"])


def test_from_json_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    tasks = tmp_path / "tasks.json"
    tasks.write_text(json.dumps({"tasks": {"hello": _py("print('hi')")}}), encoding="utf-8")

    code = run_cli(["--from", str(tasks), "--raw"])

    assert code == 0
    assert capsys.readouterr().out == "hi\n"


def test_missing_file_returns_1(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = run_cli(["--from", str(tmp_path / "missing.txt")])
    captured = capsys.readouterr()

    assert code == 1
    assert "not found" in captured.err


def test_raw_implies_quiet(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_cli(["--raw", f"[x] {_py('print(42)')}"])
    assert code == 0
    assert capsys.readouterr().out == "42\n"


def test_abort_on_fail_with_max_1(capsys: pytest.CaptureFixture[str]) -> None:
    failing = _py("raise SystemExit(1)")
    code = run_cli(["-a", "--max", "1", "-q", f"[a] {failing}", f"[b] {failing}"])
    captured = capsys.readouterr()

    assert code == 1
    assert "Error: aborted" in captured.err
    assert "Error: exit status 1" in captured.err


def test_negative_max_is_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run_cli(["--max", "-1", "echo hi"])
    assert exc_info.value.code == 2
    err = capsys.readouterr().err
    assert "--max" in err
    assert "must be 0 (unlimited) or positive" in err
    assert "Running:" not in err


def test_bad_flag_is_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run_cli(["--definitely-not-a-flag"])
    assert exc_info.value.code == 2
    assert capsys.readouterr().err != ""
