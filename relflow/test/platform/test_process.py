"""Tests for relflow.platform.process module."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from relflow.core.result import Err, Ok
from relflow.platform.process import ProcessError, run, run_live


class TestProcessError:
    """Test ProcessError dataclass."""

    def test_str_short_command(self) -> None:
        error = ProcessError(command=("git", "status"), returncode=128, stdout="", stderr="fatal")
        assert str(error) == "git status failed (exit 128)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("mvn", "-B", "clean", "install", "-DskipTests"),
            returncode=1,
            stdout="",
            stderr="",
        )
        assert str(error) == "mvn -B clean ... failed (exit 1)"

    def test_detail_prefers_stderr(self) -> None:
        error = ProcessError(("git",), 1, "out", " err \n")
        assert error.detail == "err"

    def test_detail_falls_back_to_stdout_then_str(self) -> None:
        assert ProcessError(("git",), 1, "out", "").detail == "out"
        assert ProcessError(("git",), 1, "", "").detail == "git failed (exit 1)"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    """Test run function."""

    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import sys; sys.exit(42)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1

    @patch("subprocess.run")
    def test_timeout(self, mock_run, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["git", "fetch"], timeout=1.0)

        result = run(["git", "fetch"], cwd=tmp_path, timeout=1.0)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr


class TestRunLive:
    """Test run_live function."""

    def test_success(self, tmp_path: Path) -> None:
        assert run_live([sys.executable, "-c", "pass"], cwd=tmp_path) == Ok(None)

    def test_failure_keeps_returncode(self, tmp_path: Path) -> None:
        result = run_live([sys.executable, "-c", "import sys; sys.exit(3)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 3

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run_live(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
