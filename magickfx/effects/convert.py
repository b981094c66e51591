"""Convert every image of one format in a directory to another format."""

from __future__ import annotations

import argparse
import re
from pathlib import Path
from typing import Any, Dict, List

from ..composer import compose_mogrify
from ..exceptions import FileResolutionError, OptionError
from ..options import EffectOptions, Invocation, StoreOnce, pick
from ..utils.logger import logger
from .base import Effect, RunContext

_FORMAT_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_+-]*$")


def _parse_format(value: str, name: str) -> str:
    fmt = value.strip().lstrip(".")
    if not _FORMAT_RE.match(fmt):
        raise OptionError(f"Invalid format provided for input: '{name}'", option=name)
    return fmt.lower()


def find_sources(directory: Path, fmt: str) -> List[Path]:
    """Regular files in ``directory`` whose extension matches ``fmt`` case-insensitively."""
    suffix = f".{fmt.lower()}"
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == suffix)


class ConvertEffect(Effect):
    name = "convert"
    summary = "convert images from one format to another"
    description = (
        "Convert every image in FROM format inside a directory to TO format. Existing "
        "files are left untouched; converted copies are written next to them. Run "
        "'magick identify -list format' for the formats your system supports."
    )
    noun = "convert"

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("convert_from", metavar="FROM", help="Source format, e.g. jpg")
        parser.add_argument("convert_to", metavar="TO", help="Target format, e.g. png")
        parser.add_argument(
            "-C",
            "--directory",
            action=StoreOnce,
            metavar="DIR",
            help="Directory containing the images (default: current directory)",
        )

    def needs_file(self) -> bool:
        return False

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        directory = Path(pick(namespace, "directory", defaults) or ".")
        if not directory.is_dir():
            raise FileResolutionError(f"Directory '{directory}' does not exist", option="-C")
        convert_from = _parse_format(namespace.convert_from, "FROM")
        convert_to = _parse_format(namespace.convert_to, "TO")
        if convert_from == convert_to:
            raise OptionError("FROM and TO formats must differ", option="TO")
        return EffectOptions(
            convert_from=convert_from,
            convert_to=convert_to,
            directory=directory,
        )

    async def apply(self, invocation: Invocation, ctx: RunContext) -> List[Path]:
        options = invocation.options
        assert options.directory is not None and options.convert_from and options.convert_to
        sources = find_sources(options.directory, options.convert_from)
        if not sources:
            raise FileResolutionError(
                f"No '{options.convert_from}' files found to convert in '{options.directory}'"
            )
        logger.kv_info(
            f"Converting {len(sources)} file(s) from '{options.convert_from}' to '{options.convert_to}'.",
            kv_pairs={
                "Event": "Convert",
                "From": options.convert_from,
                "To": options.convert_to,
                "Files": len(sources),
            },
        )
        await ctx.execute(
            compose_mogrify(ctx.binary, ["-format", options.convert_to], sources)
        )
        return [p.with_suffix(f".{options.convert_to}") for p in sources]
