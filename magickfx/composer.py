"""Serialize frame sequences into a single structured ``magick`` argv."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .operations import FrameSpec


def animation_settings(background: Optional[str], delay_arg: str) -> List[str]:
    args: List[str] = []
    if background is not None:
        args.extend(["-background", background])
    args.extend(["-delay", delay_arg, "-dispose", "Background"])
    return args


def compose_animation(
    binary: str,
    source: Path,
    frames: Iterable[FrameSpec],
    output: Path,
    *,
    background: Optional[str],
    delay_arg: str,
    source_first: bool = True,
) -> List[str]:
    """Build ``magick`` arguments for an animated GIF.

    With ``source_first`` the source is read before the animation settings,
    otherwise after them so the settings also apply to frame 0. One
    parenthesized sub-expression is emitted per frame, in frame order.
    """
    settings = animation_settings(background, delay_arg)
    if source_first:
        args = [binary, str(source), *settings]
    else:
        args = [binary, *settings, str(source)]
    for frame in frames:
        args.extend(frame.to_args())
    args.extend(["-loop", "0", str(output)])
    return args


def compose_strip_frames(
    binary: str,
    animation: Path,
    count: int,
    *,
    background: Optional[str],
    delay_arg: str,
) -> List[str]:
    """Drop the first ``count`` frames of ``animation`` and rewrite it in place."""
    if count < 1:
        raise ValueError("count must be positive")
    return [
        binary,
        str(animation),
        "-delete",
        f"0-{count - 1}",
        *animation_settings(background, delay_arg),
        "-loop",
        "0",
        str(animation),
    ]


def compose_mogrify(binary: str, operations: Sequence[str], files: Sequence[Path]) -> List[str]:
    """``magick mogrify`` rewrites each file in place."""
    if not files:
        raise ValueError("mogrify needs at least one file")
    return [binary, "mogrify", *operations, *(str(f) for f in files)]
