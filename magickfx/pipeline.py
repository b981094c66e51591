"""解決済みオプションから ImageMagick 呼び出しまでを統括するパイプライン。"""

from __future__ import annotations

import argparse
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .effects import Effect, RunContext, get_effect
from .exceptions import PipelineError
from .options import Invocation, resolve_single_file
from .utils.dependency_checks import ensure_magick_installed
from .utils.logger import logger, time_log
from .utils.magick_runner import DEFAULT_MAGICK_BINARY


def resolve_invocation(
    effect: Effect,
    namespace: argparse.Namespace,
    files: Sequence[str],
    config: Dict[str, Any],
) -> Invocation:
    """フラグと設定値から EffectOptions を組み立て、入力ファイルを一意に解決する。"""
    defaults = (config.get("effects") or {}).get(effect.name) or {}
    options = effect.resolve(namespace, defaults)
    file: Optional[Path] = None
    if effect.needs_file():
        file = resolve_single_file(list(files), effect.noun)
    return Invocation(effect=effect.name, options=options, file=file)


def build_context(config: Dict[str, Any]) -> RunContext:
    """Runner settings: MAGICK_BINARY beats magick.path; a timeout of 0 means none."""
    magick_cfg = config.get("magick") or {}
    binary = os.getenv("MAGICK_BINARY") or magick_cfg.get("path") or DEFAULT_MAGICK_BINARY
    timeout = magick_cfg.get("timeout_sec") or None
    return RunContext(binary=binary, timeout=float(timeout) if timeout else None)


@time_log(logger)
async def run_invocation(
    invocation: Invocation,
    config: Dict[str, Any],
    ctx: Optional[RunContext] = None,
    *,
    check_dependencies: bool = True,
) -> List[Path]:
    """Run one effect end to end and return the files it wrote.

    Any failure of the delegated tool aborts the whole run; nothing is
    retried and partially written outputs are left as they are.
    """
    effect = get_effect(invocation.effect)
    ctx = ctx or build_context(config)

    if check_dependencies:
        min_version = str((config.get("magick") or {}).get("min_version", "7.0"))
        await ensure_magick_installed(logger, min_version=min_version, binary=ctx.binary)

    logger.kv_info(
        f"Starting {effect.name} for {invocation.file or invocation.options.directory}...",
        kv_pairs={"Event": "EffectStart", "Effect": effect.name},
    )
    try:
        outputs = await effect.apply(invocation, ctx)
    except subprocess.CalledProcessError as e:
        raise PipelineError(
            f"ImageMagick exited with status {e.returncode} while running {effect.name}",
            returncode=e.returncode,
        ) from e
    except subprocess.TimeoutExpired as e:
        raise PipelineError(
            f"ImageMagick timed out after {e.timeout:.1f}s while running {effect.name}"
        ) from e

    for output in outputs:
        logger.kv_info(
            f"Created file: {output}",
            kv_pairs={"Event": "EffectOutput", "Effect": effect.name, "Output": str(output)},
        )
    logger.kv_info(
        f"{effect.name} complete ({len(ctx.commands)} ImageMagick call(s)).",
        kv_pairs={"Event": "EffectSuccess", "Effect": effect.name, "Calls": len(ctx.commands)},
    )
    return outputs
