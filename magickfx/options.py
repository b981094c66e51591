"""フラグの解析・既定値の補完・範囲検証を行うオプションリゾルバ。"""

from __future__ import annotations

import argparse
import enum
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config.validate import is_hex_color
from .exceptions import FileResolutionError, OptionError

MIN_DELAY_MS = 20

_EXPECTED_ONE_RE = re.compile(r"argument (\S+?)(?:/\S+)?: expected one argument")
_UNRECOGNIZED_RE = re.compile(r"unrecognized arguments: (.+)")
_INTEGER_RE = re.compile(r"-?\d+", re.ASCII)


class Direction(str, enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: str, flag: str) -> "Direction":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise OptionError(f"Unknown value for option '{flag}': '{value}'", option=flag)

    @property
    def vertical(self) -> bool:
        return self in (Direction.UP, Direction.DOWN)

    @property
    def sign(self) -> int:
        return -1 if self in (Direction.UP, Direction.LEFT) else 1


@dataclass(frozen=True)
class EffectOptions:
    """Resolved, validated options for one effect run.

    Fields an effect does not use keep their defaults. Instances are
    immutable; use ``dataclasses.replace`` to derive a variant.
    """

    background: Optional[str] = None
    color: Optional[str] = None
    delay: int = 50
    frames: int = 20
    rate: Optional[int] = None
    angle: Optional[int] = None
    direction: Optional[Direction] = None
    clockwise: bool = True
    fuzz: Optional[int] = None
    degrees: Optional[float] = None
    in_place: bool = False
    horizontal: bool = False
    vertical: bool = False
    seed: Optional[int] = None
    convert_from: Optional[str] = None
    convert_to: Optional[str] = None
    directory: Optional[Path] = None

    @property
    def delay_arg(self) -> str:
        return f"{self.delay}x1000"


@dataclass(frozen=True)
class Invocation:
    """Everything the pipeline needs: which effect, its options and its input file."""

    effect: str
    options: EffectOptions
    file: Optional[Path] = None


class EffectArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises OptionError instead of exiting with status 2."""

    def error(self, message: str):  # type: ignore[override]
        match = _EXPECTED_ONE_RE.search(message)
        if match:
            flag = match.group(1)
            raise OptionError(
                f"No value provided for option: '{flag}'",
                option=flag,
                help_text=self.format_help(),
            )
        match = _UNRECOGNIZED_RE.search(message)
        if match:
            raise OptionError(
                f"Unknown option: '{match.group(1).split()[0]}'",
                help_text=self.format_help(),
            )
        raise OptionError(message, help_text=self.format_help())


class StoreOnce(argparse.Action):
    """Store a single value; reject empty values and repeated flags."""

    def __call__(self, parser, namespace, values, option_string=None):
        flag = self.option_strings[0]
        seen = namespace.__dict__.setdefault("_seen_options", set())
        if values is None or str(values) == "":
            raise OptionError(
                f"No value provided for option: '{flag}'",
                option=flag,
                help_text=parser.format_help(),
            )
        if self.dest in seen:
            raise OptionError(
                f"Duplicate options provided for: '{flag}'",
                option=flag,
                help_text=parser.format_help(),
            )
        seen.add(self.dest)
        setattr(namespace, self.dest, values)


# ---------------------------------------------------------------------------
# value validators
# ---------------------------------------------------------------------------


def parse_color(value: Any, flag: str) -> str:
    if not isinstance(value, str) or not is_hex_color(value):
        raise OptionError(f"Invalid HEX provided for option: '{flag}'", option=flag)
    return value


def parse_int(
    value: Any,
    flag: str,
    *,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    """Parse a non-negative integer flag value and apply inclusive bounds."""
    if isinstance(value, bool):
        raise OptionError(f"Invalid VALUE provided for option: '{flag}'", option=flag)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _INTEGER_RE.fullmatch(value.strip()):
        number = int(value.strip())
    else:
        raise OptionError(f"Invalid VALUE provided for option: '{flag}'", option=flag)
    if minimum is not None and number < minimum:
        raise OptionError(
            f"VALUE provided for flag is below minimum value: '{flag}'", option=flag
        )
    if maximum is not None and number > maximum:
        raise OptionError(
            f"VALUE provided for flag is above maximum value: '{flag}'", option=flag
        )
    return number


def parse_number(value: Any, flag: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise OptionError(f"Invalid VALUE provided for option: '{flag}'", option=flag)
    if not math.isfinite(number):
        raise OptionError(f"Invalid VALUE provided for option: '{flag}'", option=flag)
    return number


def parse_delay(value: Any, flag: str = "-d") -> int:
    return parse_int(value, flag, minimum=MIN_DELAY_MS)


def pick(namespace: argparse.Namespace, dest: str, defaults: Dict[str, Any], key: Optional[str] = None) -> Any:
    """Flag value if the user gave one, otherwise the configured default."""
    value = getattr(namespace, dest, None)
    if value is not None:
        return value
    return defaults.get(key or dest)


# ---------------------------------------------------------------------------
# file resolution
# ---------------------------------------------------------------------------


def resolve_single_file(candidates: Sequence[str], noun: str = "animate") -> Path:
    """Resolve exactly one regular input file.

    The parent directory is also scanned case-insensitively so that names
    differing only by case (``Image.png`` / ``image.PNG``) are reported as
    ambiguous rather than silently picking one.
    """
    if not candidates:
        raise OptionError("No value provided for required input: 'FILE'", option="FILE")
    if len(candidates) > 1:
        raise OptionError(
            f"More than one FILE was provided: '{candidates[0]}' and '{candidates[1]}'",
            option="FILE",
        )

    raw = candidates[0]
    if not raw:
        raise OptionError("No FILE provided", option="FILE")
    path = Path(raw)
    if not path.exists():
        raise FileResolutionError(f"FILE '{raw}' does not exist", option="FILE")
    if not path.is_file():
        raise FileResolutionError(
            f"Unrecognized type for FILE: '{raw}'. File type must be a regular file",
            option="FILE",
        )

    directory = path.parent
    wanted = path.name.lower()
    matches: List[Path] = [
        p for p in directory.iterdir() if p.is_file() and p.name.lower() == wanted
    ]
    if not matches:
        raise FileResolutionError(f"No files found to {noun}!", option="FILE")
    if len(matches) > 1:
        raise FileResolutionError(f"Found more than one file to {noun}!", option="FILE")
    return path
