"""Flip an image along one or both axes."""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from ..exceptions import OptionError
from ..options import EffectOptions
from .base import MogrifyEffect, add_file_argument


class FlipEffect(MogrifyEffect):
    name = "flip"
    summary = "flip an image along its horizontal and/or vertical axis"
    description = (
        "Flips an input image FILE along one or both of its axes (horizontal and/or "
        "vertical). At least one axis must be provided."
    )
    suffix = "_flipped"
    noun = "flip"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-i", "--in-place", dest="in_place", action="store_true",
            help="Replace FILE with its flipped version",
        )
        parser.add_argument(
            "-o", "--horizontal", action="store_true",
            help="Flip FILE along its horizontal axis (top and bottom swap)",
        )
        parser.add_argument(
            "-v", "--vertical", action="store_true",
            help="Flip FILE along its vertical axis (left and right swap)",
        )
        add_file_argument(parser)

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        if not (namespace.horizontal or namespace.vertical):
            raise OptionError(
                "At least one of the following options must be provided: '-o', '-v'"
            )
        return EffectOptions(
            horizontal=namespace.horizontal,
            vertical=namespace.vertical,
            in_place=namespace.in_place,
        )

    def mogrify_operations(self, options: EffectOptions) -> List[str]:
        ops = []
        if options.horizontal:
            ops.append("-flip")
        if options.vertical:
            ops.append("-flop")
        return ops
