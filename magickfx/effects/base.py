"""Effect strategy base classes."""

from __future__ import annotations

import argparse
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Sequence

from ..composer import compose_animation, compose_mogrify
from ..operations import FrameSpec
from ..options import EffectOptions, Invocation, StoreOnce, parse_delay, pick
from ..utils.magick_probe import SourceImage, probe_source_image
from ..utils.magick_runner import DEFAULT_MAGICK_BINARY, run_magick_async

Runner = Callable[..., Awaitable[subprocess.CompletedProcess]]
Probe = Callable[..., Awaitable[SourceImage]]


@dataclass
class RunContext:
    """Collaborators handed to an effect; tests swap in fakes."""

    binary: str = DEFAULT_MAGICK_BINARY
    timeout: float | None = None
    run: Runner = run_magick_async
    probe: Probe = probe_source_image
    commands: List[List[str]] = field(default_factory=list)

    async def execute(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        self.commands.append(list(args))
        return await self.run(list(args), timeout=self.timeout)

    async def identify(self, path: Path) -> SourceImage:
        return await self.probe(path, self.binary)


class Effect:
    """A single visual transformation exposed as a CLI subcommand."""

    name: str = ""
    summary: str = ""
    description: str = ""
    # Verb used in file resolution errors ("No files found to <noun>!")
    noun: str = "animate"
    aliases: Sequence[str] = ()

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        raise NotImplementedError

    def resolve(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> EffectOptions:
        raise NotImplementedError

    def file_candidates(self, namespace: argparse.Namespace) -> List[str]:
        return list(getattr(namespace, "files", None) or [])

    def needs_file(self) -> bool:
        return True

    async def apply(self, invocation: Invocation, ctx: RunContext) -> List[Path]:
        raise NotImplementedError


def add_delay_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d",
        "--delay",
        action=StoreOnce,
        metavar="VALUE",
        help="Delay between frames in milliseconds; GIF rendering needs at least 20 (default: 50)",
    )


def add_background_argument(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument("-b", "--background", action=StoreOnce, metavar="HEX", help=help_text)


def add_file_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("files", nargs="*", metavar="FILE", help="Input image file")


class AnimatedEffect(Effect):
    """Effect that renders an animated GIF from a frame sequence.

    Subclasses implement :meth:`build_frames`; composition, invocation and
    output naming are shared.
    """

    suffix: str = ""
    # Read the source before the -background/-delay settings
    source_first: bool = True
    # Whether build_frames needs real width/height
    needs_dimensions: bool = True

    def build_frames(self, options: EffectOptions, source: SourceImage) -> List[FrameSpec]:
        raise NotImplementedError

    def output_path(self, source: Path) -> Path:
        return source.parent / f"{source.stem}{self.suffix}.gif"

    def resolve_common(self, namespace: argparse.Namespace, defaults: Dict[str, Any]) -> Dict[str, Any]:
        return {"delay": parse_delay(pick(namespace, "delay", defaults))}

    async def post_process(self, output: Path, options: EffectOptions, ctx: RunContext) -> None:
        return None

    async def apply(self, invocation: Invocation, ctx: RunContext) -> List[Path]:
        assert invocation.file is not None
        options = invocation.options
        if self.needs_dimensions:
            source = await ctx.identify(invocation.file)
        else:
            source = SourceImage(path=invocation.file, width=0, height=0)

        frames = self.build_frames(options, source)
        output = self.output_path(invocation.file)
        args = compose_animation(
            ctx.binary,
            invocation.file,
            frames,
            output,
            background=options.background,
            delay_arg=options.delay_arg,
            source_first=self.source_first,
        )
        await ctx.execute(args)
        await self.post_process(output, options, ctx)
        return [output]


class MogrifyEffect(Effect):
    """Single-image effect run through ``magick mogrify``.

    Without ``in_place`` the source is first copied to ``<stem><suffix><ext>``
    and the copy is rewritten.
    """

    suffix: str = ""
    noun: str = "transform"

    def mogrify_operations(self, options: EffectOptions) -> List[str]:
        raise NotImplementedError

    def target_path(self, source: Path, in_place: bool) -> Path:
        if in_place:
            return source
        return source.parent / f"{source.stem}{self.suffix}{source.suffix}"

    async def apply(self, invocation: Invocation, ctx: RunContext) -> List[Path]:
        assert invocation.file is not None
        options = invocation.options
        target = self.target_path(invocation.file, options.in_place)
        if target != invocation.file:
            shutil.copy2(invocation.file, target)
        await ctx.execute(compose_mogrify(ctx.binary, self.mogrify_operations(options), [target]))
        return [target]
