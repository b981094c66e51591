"""Registry of available effects."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .base import AnimatedEffect, Effect, MogrifyEffect, RunContext
from .convert import ConvertEffect
from .flip import FlipEffect
from .implosion import ExplodeEffect, ImplodeEffect
from .intensify import IntensifyEffect
from .partify import PartifyEffect
from .rotate import RotateEffect
from .spin import SpinEffect
from .train import TrainEffect

_EFFECT_REGISTRY: Dict[str, Effect] = {}
_CANONICAL: List[str] = []


def register_effect(effect: Effect, *, aliases: Optional[Sequence[str]] = None) -> None:
    """Register an effect under its name and aliases; later registrations win."""

    if not effect.name:
        raise ValueError("effect must have a name")
    if effect.name not in _CANONICAL:
        _CANONICAL.append(effect.name)
    for key in (effect.name, *(aliases if aliases is not None else effect.aliases)):
        _EFFECT_REGISTRY[key] = effect


def get_effect(name: str) -> Effect:
    try:
        return _EFFECT_REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown effect: '{name}'") from None


def available_effects() -> List[Effect]:
    """Canonical effects in registration order (aliases excluded)."""
    return [_EFFECT_REGISTRY[name] for name in _CANONICAL]


for _effect in (
    ExplodeEffect(),
    ImplodeEffect(),
    IntensifyEffect(),
    SpinEffect(),
    TrainEffect(),
    PartifyEffect(),
    RotateEffect(),
    FlipEffect(),
    ConvertEffect(),
):
    register_effect(_effect)

__all__ = [
    "AnimatedEffect",
    "Effect",
    "MogrifyEffect",
    "RunContext",
    "available_effects",
    "get_effect",
    "register_effect",
]
