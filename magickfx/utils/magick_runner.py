"""ImageMagickコマンドを非同期実行するヘルパー。"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import subprocess
import time
from typing import List, Optional, Sequence

from .logger import logger

DEFAULT_MAGICK_BINARY = "magick"


def magick_binary() -> str:
    """実行する magick バイナリ名 (MAGICK_BINARY で上書き可能)。"""
    return os.getenv("MAGICK_BINARY") or DEFAULT_MAGICK_BINARY


def _env_timeout() -> Optional[float]:
    try:
        env_to = float(os.getenv("MAGICK_RUN_TIMEOUT_SEC", "0") or 0)
    except ValueError:
        return None
    return env_to if env_to > 0 else None


async def run_magick_async(
    args: Sequence[str],
    *,
    timeout: Optional[float] = None,
    error_log_level: int | None = logging.ERROR,
) -> subprocess.CompletedProcess:
    """
    magick を非同期で起動し、ログとタイムアウトを管理する。

    引数はシェルを介さずそのまま execve に渡されるため、色指定やパスに
    含まれる記号がコマンドとして解釈されることはない。

    :param timeout: 秒数。None の場合は MAGICK_RUN_TIMEOUT_SEC を参照し、
        未設定なら無制限。
    :param error_log_level: 非0終了コード時に出力するログレベル。
        `None` を指定するとログ出力しない。
    """
    argv: List[str] = [str(a) for a in args]
    base = os.path.basename(argv[0]) if argv else DEFAULT_MAGICK_BINARY
    if timeout is None:
        timeout = _env_timeout()

    cmd_str = " ".join(argv)
    if os.getenv("MAGICK_LOG_CMD", "0") == "1":
        logger.info(f"Running command: {cmd_str}")
    else:
        logger.debug(f"Running command: {cmd_str}")

    t0 = time.monotonic()
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        logger.error(
            f"{base} command not found. Please ensure ImageMagick is installed and in your PATH."
        )
        raise
    logger.debug(f"Spawned PID={process.pid} for {base}")

    try:
        if timeout is not None and timeout > 0:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        else:
            stdout, stderr = await process.communicate()
    except asyncio.TimeoutError:
        logger.error(
            f"Command timed out after {timeout:.1f}s (PID={process.pid}). Sending terminate..."
        )
        with contextlib.suppress(ProcessLookupError):
            process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=5.0)
        except asyncio.TimeoutError:
            logger.error(f"Process did not terminate in 5.0s; killing PID={process.pid}...")
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
        raise subprocess.TimeoutExpired(argv, timeout)
    except asyncio.CancelledError:
        logger.warning(f"Task cancelled while running {base} (PID={process.pid}); terminating...")
        with contextlib.suppress(ProcessLookupError):
            process.terminate()
        raise

    stdout_str = stdout.decode(errors="ignore")
    stderr_str = stderr.decode(errors="ignore")

    rc = process.returncode if process.returncode is not None else 0
    dt = time.monotonic() - t0
    logger.debug(f"Command finished rc={rc} in {dt:.2f}s (PID={process.pid})")

    if rc != 0:
        if error_log_level is not None:
            logger.log(error_log_level, f"ImageMagick command failed rc={rc}. Command: {cmd_str}")
            if stderr_str:
                logger.log(error_log_level, f"stderr:\n{stderr_str}")
        elif stderr_str:
            logger.debug(f"stderr:\n{stderr_str}")
        if stdout_str:
            logger.debug(f"stdout:\n{stdout_str}")
        raise subprocess.CalledProcessError(rc, argv, output=stdout_str, stderr=stderr_str)

    if stderr_str:
        logger.debug(f"magick stderr (on success):\n{stderr_str}")

    return subprocess.CompletedProcess(argv, rc, stdout_str, stderr_str)
