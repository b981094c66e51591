"""Intensify: the image shakes around inside its frame."""

from __future__ import annotations

import argparse
import random
from typing import Any, Dict, List, Optional

from ..operations import FrameSpec, Shift
from ..options import EffectOptions, StoreOnce, parse_color, parse_int, pick
from ..utils.magick_probe import SourceImage
from .base import AnimatedEffect, add_background_argument, add_delay_argument, add_file_argument


def _displacement(rng: random.Random, limit: int) -> int:
    if limit <= 0:
        return 0
    magnitude = rng.randrange(limit)
    return magnitude if rng.randrange(2) == 0 else -magnitude


def shake_offsets(
    width: int, height: int, intensity: int, count: int, seed: Optional[int] = None
) -> List[tuple[int, int]]:
    """Random (dx, dy) pairs bounded by ``intensity`` percent of each dimension.

    Offsets are independent per frame. Passing ``seed`` makes the sequence
    reproducible.
    """
    rng = random.Random(seed)
    limit_x = intensity * width // 100
    limit_y = intensity * height // 100
    offsets = []
    for _ in range(count):
        dx = _displacement(rng, limit_x)
        dy = _displacement(rng, limit_y)
        offsets.append((dx, dy))
    return offsets


class IntensifyEffect(AnimatedEffect):
    name = "intensify"
    aliases = ("shake",)
    summary = "image shakes within its frame"
    description = (
        "Create an animated GIF of an input image in FILE that appears to shake "
        "within the image's frame."
    )
    suffix = "_intensifies"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        add_background_argument(
            parser,
            "Color in RGB HEX revealed behind the shaking image (default: '#00000000', transparent)",
        )
        add_delay_argument(parser)
        parser.add_argument(
            "-f",
            "--frames",
            action=StoreOnce,
            metavar="VALUE",
            help="Number of frames in the animation (default: 20)",
        )
        parser.add_argument(
            "-i",
            "--intensity",
            action=StoreOnce,
            metavar="VALUE",
            help="Maximum shake as a percent of the image dimensions, 1-100 (default: 5)",
        )
        parser.add_argument(
            "-s",
            "--seed",
            action=StoreOnce,
            metavar="VALUE",
            help="Random seed for a reproducible shake (default: random)",
        )
        add_file_argument(parser)

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        seed = pick(namespace, "seed", defaults)
        return EffectOptions(
            background=parse_color(pick(namespace, "background", defaults), "-b"),
            frames=parse_int(pick(namespace, "frames", defaults), "-f", minimum=1),
            rate=parse_int(pick(namespace, "intensity", defaults), "-i", minimum=1, maximum=100),
            seed=parse_int(seed, "-s", minimum=0) if seed is not None else None,
            **self.resolve_common(namespace, defaults),
        )

    def build_frames(self, options: EffectOptions, source: SourceImage) -> List[FrameSpec]:
        assert options.rate is not None
        offsets = shake_offsets(
            source.width, source.height, options.rate, options.frames - 1, seed=options.seed
        )
        return [
            FrameSpec(index=index, source=0, operations=(Shift(dx, dy),))
            for index, (dx, dy) in enumerate(offsets, start=1)
        ]
