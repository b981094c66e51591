"""Typed ImageMagick operation descriptors.

Each descriptor renders to discrete argv tokens. Nothing here is ever joined
into a shell string, so colors, geometry and paths are passed to ``magick``
verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union


def _signed(value: int) -> str:
    return f"{value:+d}"


@dataclass(frozen=True)
class Clone:
    index: int

    def to_args(self) -> List[str]:
        return ["-clone", str(self.index)]


@dataclass(frozen=True)
class Gravity:
    value: str = "center"

    def to_args(self) -> List[str]:
        return ["-gravity", self.value]


@dataclass(frozen=True)
class DrawPoint:
    """Paint a single pixel, used as the seed of the explosion."""

    color: str
    x: int
    y: int

    def to_args(self) -> List[str]:
        return ["-draw", f"fill {self.color} point {self.x},{self.y}"]


@dataclass(frozen=True)
class Resize:
    percent: int

    def to_args(self) -> List[str]:
        return ["-resize", f"{self.percent}%"]


@dataclass(frozen=True)
class Implode:
    """Negative amounts explode, positive amounts implode."""

    amount: int

    def to_args(self) -> List[str]:
        return ["-implode", _signed(self.amount)]


@dataclass(frozen=True)
class Extent:
    width: int
    height: int

    def to_args(self) -> List[str]:
        return ["-extent", f"{self.width}x{self.height}"]


@dataclass(frozen=True)
class Rotate:
    """Scale-Rotate-Translate distortion with only an angle."""

    angle: int

    def to_args(self) -> List[str]:
        return ["-distort", "SRT", str(self.angle)]


@dataclass(frozen=True)
class Shift:
    """Scale-Rotate-Translate distortion that only translates."""

    dx: int
    dy: int

    def to_args(self) -> List[str]:
        return ["-distort", "SRT", f"0,0 1 0 {_signed(self.dx)}{_signed(self.dy)}"]


@dataclass(frozen=True)
class Roll:
    """Wrap-around translation."""

    dx: int
    dy: int

    def to_args(self) -> List[str]:
        return ["-roll", f"{_signed(self.dx)}{_signed(self.dy)}"]


@dataclass(frozen=True)
class Fill:
    color: str

    def to_args(self) -> List[str]:
        return ["-fill", self.color]


@dataclass(frozen=True)
class Opaque:
    color: str

    def to_args(self) -> List[str]:
        return ["-opaque", self.color]


@dataclass(frozen=True)
class Fuzz:
    percent: int

    def to_args(self) -> List[str]:
        return ["-fuzz", f"{self.percent}%"]


Operation = Union[
    Clone, Gravity, DrawPoint, Resize, Implode, Extent, Rotate, Shift, Roll, Fill, Opaque, Fuzz
]


@dataclass(frozen=True)
class FrameSpec:
    """One generated animation frame.

    ``index`` is the frame's position in the output (the untouched source is
    frame 0 and never has a FrameSpec); ``source`` is the frame it is cloned
    from.
    """

    index: int
    source: int
    operations: Tuple[Operation, ...]

    def to_args(self) -> List[str]:
        args = ["(", *Clone(self.source).to_args()]
        for op in self.operations:
            args.extend(op.to_args())
        args.append(")")
        return args
