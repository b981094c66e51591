"""Partify: a target color cycles through a rainbow palette."""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from ..composer import compose_strip_frames
from ..operations import Fill, FrameSpec, Fuzz, Opaque
from ..options import EffectOptions, StoreOnce, parse_color, parse_int, pick
from ..utils.logger import logger
from ..utils.magick_probe import SourceImage
from .base import AnimatedEffect, RunContext, add_background_argument, add_delay_argument, add_file_argument

PARTY_COLORS = (
    "#FF6B6B",
    "#FF6BB5",
    "#FF81FF",
    "#D081FF",
    "#81ACFF",
    "#81FFFF",
    "#81FF81",
    "#FFD081",
    "#FF8181",
)

# The palette is rendered twice; the first pass is thrown away afterwards
# because ImageMagick leaves the first clone(s) un-recolored.
PALETTE_PASSES = 2


def palette_cycle(palette=PARTY_COLORS, passes: int = PALETTE_PASSES) -> List[str]:
    """Fill color of every generated clone, in order."""
    total_frames = len(palette) * passes
    return [palette[(index - 1) % len(palette)] for index in range(1, total_frames)]


class PartifyEffect(AnimatedEffect):
    name = "partify"
    aliases = ("party",)
    summary = "image cycles through rainbow colors"
    description = (
        "Create an animated GIF of an input image in FILE that appears to change colors "
        "in a gradient to every color of the rainbow."
    )
    suffix = "_party"
    needs_dimensions = False

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        add_background_argument(
            parser,
            "Background fill color in RGB HEX starting with '#' (default: '#00000000', transparent)",
        )
        parser.add_argument(
            "-c",
            "--color",
            action=StoreOnce,
            metavar="HEX",
            help="Color in RGB HEX replaced with party colors (default: '#000000', black)",
        )
        add_delay_argument(parser)
        parser.add_argument(
            "-f",
            "--fuzz",
            action=StoreOnce,
            metavar="VALUE",
            help="Percent tolerance when matching the target color, 0-100; 0 is exact (default: 10)",
        )
        add_file_argument(parser)

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        return EffectOptions(
            background=parse_color(pick(namespace, "background", defaults), "-b"),
            color=parse_color(pick(namespace, "color", defaults), "-c"),
            fuzz=parse_int(pick(namespace, "fuzz", defaults), "-f", minimum=0, maximum=100),
            frames=len(PARTY_COLORS) * PALETTE_PASSES,
            **self.resolve_common(namespace, defaults),
        )

    def build_frames(self, options: EffectOptions, source: SourceImage) -> List[FrameSpec]:
        assert options.color is not None and options.fuzz is not None
        return [
            FrameSpec(
                index=index,
                source=0,
                operations=(Fill(color), Opaque(options.color), Fuzz(options.fuzz)),
            )
            for index, color in enumerate(palette_cycle(), start=1)
        ]

    async def post_process(self, output, options: EffectOptions, ctx: RunContext) -> None:
        logger.kv_debug(
            "Stripping first palette pass.",
            kv_pairs={"Event": "PostProcess", "Effect": self.name, "Frames": len(PARTY_COLORS)},
        )
        await ctx.execute(
            compose_strip_frames(
                ctx.binary,
                output,
                len(PARTY_COLORS),
                background=options.background,
                delay_arg=options.delay_arg,
            )
        )
