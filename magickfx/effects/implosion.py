"""Explode / implode: repeated ``-implode`` with exponentially growing strength."""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from ..operations import DrawPoint, Extent, FrameSpec, Gravity, Implode, Resize
from ..options import EffectOptions, StoreOnce, parse_color, parse_int, pick
from ..utils.magick_probe import SourceImage
from .base import AnimatedEffect, add_background_argument, add_delay_argument, add_file_argument

BACKGROUND_HELP = (
    "Background fill color in RGB HEX starting with '#' (default: '#00000000', transparent)"
)


def intensity_sequence(seed: int, count: int) -> List[int]:
    """``count`` implode amounts starting at ``seed`` and doubling each step."""
    amounts = []
    amount = seed
    for _ in range(count):
        amounts.append(amount)
        amount *= 2
    return amounts


class ExplodeEffect(AnimatedEffect):
    name = "explode"
    summary = "image expands and explodes within its frame"
    description = (
        "Create an animated GIF of an input image in FILE that appears to expand "
        "and explode within the image's frame."
    )
    suffix = "_exploding"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        add_background_argument(parser, BACKGROUND_HELP)
        parser.add_argument(
            "-c",
            "--color",
            action=StoreOnce,
            metavar="HEX",
            help="Color of the explosion in RGB HEX (default: '#00000000', transparent)",
        )
        add_delay_argument(parser)
        parser.add_argument(
            "-e",
            "--expansion",
            action=StoreOnce,
            metavar="VALUE",
            help="Percent the image grows inside the canvas each frame, 1-100 (default: 5)",
        )
        parser.add_argument(
            "-f",
            "--frames",
            action=StoreOnce,
            metavar="VALUE",
            help="Number of frames in the animation (default: 20)",
        )
        add_file_argument(parser)

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        return EffectOptions(
            background=parse_color(pick(namespace, "background", defaults), "-b"),
            color=parse_color(pick(namespace, "color", defaults), "-c"),
            frames=parse_int(pick(namespace, "frames", defaults), "-f", minimum=1),
            rate=parse_int(pick(namespace, "expansion", defaults), "-e", minimum=1, maximum=100),
            **self.resolve_common(namespace, defaults),
        )

    def build_frames(self, options: EffectOptions, source: SourceImage) -> List[FrameSpec]:
        assert options.rate is not None and options.color is not None
        center_x = source.width // 2
        center_y = source.height // 2
        resize_percent = 100 + options.rate

        frames = []
        # Each frame grows out of the previous one, so the blast compounds
        for index, amount in enumerate(intensity_sequence(-1, options.frames - 1), start=1):
            frames.append(
                FrameSpec(
                    index=index,
                    source=index - 1,
                    operations=(
                        Gravity("center"),
                        DrawPoint(options.color, center_x, center_y),
                        Resize(resize_percent),
                        Implode(amount),
                        Extent(source.width, source.height),
                    ),
                )
            )
        return frames


class ImplodeEffect(AnimatedEffect):
    name = "implode"
    summary = "image shrinks and implodes within its frame"
    description = (
        "Create an animated GIF of an input image in FILE that appears to shrink "
        "and implode within the image's frame."
    )
    suffix = "_imploding"
    needs_dimensions = False

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        add_background_argument(parser, BACKGROUND_HELP)
        add_delay_argument(parser)
        parser.add_argument(
            "-f",
            "--frames",
            action=StoreOnce,
            metavar="VALUE",
            help="Number of frames in the animation (default: 20)",
        )
        add_file_argument(parser)

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        return EffectOptions(
            background=parse_color(pick(namespace, "background", defaults), "-b"),
            frames=parse_int(pick(namespace, "frames", defaults), "-f", minimum=1),
            **self.resolve_common(namespace, defaults),
        )

    def build_frames(self, options: EffectOptions, source: SourceImage) -> List[FrameSpec]:
        # TODO: ImageMagick starts failing on some images once the positive
        # amount gets large (~2**16); cap the amount once a safe bound is known.
        return [
            FrameSpec(index=index, source=index - 1, operations=(Gravity("center"), Implode(amount)))
            for index, amount in enumerate(intensity_sequence(1, options.frames - 1), start=1)
        ]
