"""magick identify を利用した画像情報取得ヘルパー。"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .logger import logger
from .magick_runner import magick_binary, run_magick_async

_size_memo: Dict[tuple, "SourceImage"] = {}


@dataclass(frozen=True)
class SourceImage:
    """入力画像のパスと寸法。寸法は外部ツールから一度だけ読み取る。"""

    path: Path
    width: int
    height: int


def _parse_size(output: str, path: Path) -> tuple[int, int]:
    # Multi-frame inputs print one "WxH" per frame; the first frame wins.
    first = output.strip().split()[0] if output.strip() else ""
    try:
        width_str, height_str = first.split("x", 1)
        return int(width_str), int(height_str)
    except ValueError:
        raise ValueError(f"Unexpected identify output for {path}: {output!r}")


async def probe_source_image(path: Path, binary: Optional[str] = None) -> SourceImage:
    """画像の幅と高さを取得する。同一ファイル (mtime/size) の結果はメモ化する。"""
    p = Path(path)
    st = p.stat()
    key = (str(p.resolve()), int(st.st_mtime), st.st_size)
    if key in _size_memo:
        return _size_memo[key]

    cmd = [binary or magick_binary(), "identify", "-format", "%[width]x%[height] ", str(p)]
    try:
        result = await run_magick_async(cmd)
    except subprocess.CalledProcessError as e:
        logger.error(f"Error running identify for {p}: {e.stderr}")
        raise
    width, height = _parse_size(result.stdout, p)

    source = SourceImage(path=p, width=width, height=height)
    _size_memo[key] = source
    return source
