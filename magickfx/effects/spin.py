"""Spin: the image rotates continuously in a loop."""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from ..exceptions import OptionError
from ..operations import FrameSpec, Rotate
from ..options import EffectOptions, StoreOnce, parse_color, parse_int, pick
from ..utils.magick_probe import SourceImage
from .base import AnimatedEffect, add_background_argument, add_delay_argument, add_file_argument

FULL_TURN = 360


def spin_angles(step: int, clockwise: bool = True) -> List[int]:
    """Angles strictly between 0 and 360, ``step`` apart, in playback order."""
    if step <= 0 or FULL_TURN % step:
        raise ValueError(f"step must be a positive factor of {FULL_TURN}: {step}")
    angles = list(range(step, FULL_TURN, step))
    return angles if clockwise else angles[::-1]


class SpinEffect(AnimatedEffect):
    name = "spin"
    summary = "image rotates continuously in a loop"
    description = (
        "Create an animated GIF of an input image in FILE that appears to rotate "
        "in one direction continuously in a loop."
    )
    suffix = "_spinning"
    noun = "spin"
    source_first = False
    needs_dimensions = False

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-a",
            "--angle",
            action=StoreOnce,
            metavar="VALUE",
            help="Degrees turned per frame; a factor of 360 between 1 and 180 (default: 5)",
        )
        add_background_argument(
            parser,
            "Color in RGB HEX filling the corners uncovered by rotation (default: '#00000000', transparent)",
        )
        parser.add_argument(
            "-c",
            "--counter-clockwise",
            dest="counter_clockwise",
            action="store_true",
            help="Spin counter-clockwise instead of clockwise",
        )
        add_delay_argument(parser)
        add_file_argument(parser)

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        angle = parse_int(pick(namespace, "angle", defaults), "-a", minimum=1, maximum=180)
        if FULL_TURN % angle:
            raise OptionError("Value provided for flag is not a factor of 360: '-a'", option="-a")
        return EffectOptions(
            background=parse_color(pick(namespace, "background", defaults), "-b"),
            angle=angle,
            clockwise=not namespace.counter_clockwise,
            **self.resolve_common(namespace, defaults),
        )

    def build_frames(self, options: EffectOptions, source: SourceImage) -> List[FrameSpec]:
        assert options.angle is not None
        return [
            FrameSpec(index=index, source=0, operations=(Rotate(angle),))
            for index, angle in enumerate(spin_angles(options.angle, options.clockwise), start=1)
        ]
