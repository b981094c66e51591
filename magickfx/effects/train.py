"""Train: the image slides across its frame and wraps around, like a conga line."""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from ..exceptions import OptionError
from ..operations import FrameSpec, Roll
from ..options import Direction, EffectOptions, StoreOnce, parse_int, pick
from ..utils.magick_probe import SourceImage
from .base import AnimatedEffect, add_delay_argument, add_file_argument


def roll_offsets(width: int, height: int, min_frames: int, direction: Direction) -> List[tuple[int, int]]:
    """Cumulative (dx, dy) offsets for one traversal of the image.

    The step is ``dimension // min_frames`` so the traversal takes at least
    ``min_frames`` frames; the untouched source is the first of them.
    """
    dimension = height if direction.vertical else width
    increment = dimension // min_frames
    if increment <= 0:
        raise OptionError(
            f"VALUE provided for flag is larger than the image dimension ({dimension}px): '-f'",
            option="-f",
        )
    total_frames = dimension // increment

    offsets = []
    for step in range(1, total_frames):
        displacement = direction.sign * increment * step
        if direction.vertical:
            offsets.append((0, displacement))
        else:
            offsets.append((displacement, 0))
    return offsets


class TrainEffect(AnimatedEffect):
    name = "train"
    aliases = ("slide",)
    summary = "image slides across its frame in a loop"
    description = (
        "Create an animated GIF of an input image in FILE that appears to move from one "
        "side of the image across to the opposite side repeatedly in a loop, like a train "
        "or a Conga line."
    )
    suffix = "_train"
    source_first = False

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        add_delay_argument(parser)
        parser.add_argument(
            "-f",
            "--min-frames",
            dest="min_frames",
            action=StoreOnce,
            metavar="VALUE",
            help="Use at least VALUE frames; more is smoother but larger (default: 20)",
        )
        parser.add_argument(
            "-m",
            "--move",
            dest="direction",
            action=StoreOnce,
            metavar="DIRECTION",
            help="UP, DOWN, LEFT or RIGHT, case-insensitive (default: RIGHT)",
        )
        add_file_argument(parser)

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        return EffectOptions(
            frames=parse_int(pick(namespace, "min_frames", defaults), "-f", minimum=1),
            direction=Direction.parse(pick(namespace, "direction", defaults), "-m"),
            **self.resolve_common(namespace, defaults),
        )

    def build_frames(self, options: EffectOptions, source: SourceImage) -> List[FrameSpec]:
        assert options.direction is not None
        offsets = roll_offsets(source.width, source.height, options.frames, options.direction)
        return [
            FrameSpec(index=index, source=0, operations=(Roll(dx, dy),))
            for index, (dx, dy) in enumerate(offsets, start=1)
        ]
