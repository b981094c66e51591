"""Rotate an image by a number of degrees."""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from ..exceptions import OptionError
from ..options import EffectOptions, StoreOnce, parse_number, pick
from .base import MogrifyEffect, add_file_argument


def format_degrees(degrees: float) -> str:
    return str(int(degrees)) if float(degrees).is_integer() else repr(float(degrees))


class RotateEffect(MogrifyEffect):
    name = "rotate"
    summary = "rotate an image to a new orientation"
    description = (
        "Rotate an input image FILE from its current orientation to a new orientation "
        "that is rotated a number of degrees in one direction. Default rotational "
        "direction is clockwise."
    )
    suffix = "_rotated"
    noun = "rotate"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-c",
            "--counter-clockwise",
            dest="counter_clockwise",
            action="store_true",
            help="Rotate counter-clockwise instead of clockwise",
        )
        parser.add_argument(
            "-d",
            "--degrees",
            action=StoreOnce,
            metavar="VALUE",
            help="(REQUIRED) Rotate the image VALUE degrees in one direction",
        )
        parser.add_argument(
            "-i",
            "--in-place",
            dest="in_place",
            action="store_true",
            help="Replace FILE with its rotated version",
        )
        add_file_argument(parser)

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        raw = pick(namespace, "degrees", defaults)
        if raw is None:
            raise OptionError("No value provided for required option: '-d'", option="-d")
        return EffectOptions(
            degrees=parse_number(raw, "-d"),
            clockwise=not namespace.counter_clockwise,
            in_place=namespace.in_place,
        )

    def mogrify_operations(self, options: EffectOptions) -> List[str]:
        assert options.degrees is not None
        degrees = options.degrees if options.clockwise else -options.degrees
        return ["-rotate", format_degrees(degrees)]
