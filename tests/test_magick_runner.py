import asyncio
import logging
import pathlib
import subprocess
import sys

import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
from magickfx.utils.magick_runner import run_magick_async


def test_run_magick_async_no_error_logs(caplog):
    """error_log_levelをWARNINGにするとERRORログが出ない"""
    with caplog.at_level(logging.ERROR, logger="magickfx"):
        with pytest.raises(subprocess.CalledProcessError):
            asyncio.run(
                run_magick_async(["bash", "-c", "exit 1"], error_log_level=logging.WARNING)
            )
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


def test_run_magick_async_logs_failure_and_keeps_returncode(caplog):
    with caplog.at_level(logging.ERROR, logger="magickfx"):
        with pytest.raises(subprocess.CalledProcessError) as exc:
            asyncio.run(run_magick_async(["bash", "-c", "echo boom >&2; exit 3"]))
    assert exc.value.returncode == 3
    assert "boom" in exc.value.stderr
    assert any("failed rc=3" in r.getMessage() for r in caplog.records)


def test_run_magick_async_returns_stdout():
    result = asyncio.run(run_magick_async(["bash", "-c", "printf 64x48"]))
    assert result.returncode == 0
    assert result.stdout == "64x48"


def test_run_magick_async_times_out():
    with pytest.raises(subprocess.TimeoutExpired):
        asyncio.run(run_magick_async(["sleep", "5"], timeout=0.2))


def test_missing_binary_raises_file_not_found():
    with pytest.raises(FileNotFoundError):
        asyncio.run(run_magick_async(["magickfx-no-such-binary", "-version"]))
