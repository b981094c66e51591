import re
from typing import Any, Dict

from ..exceptions import ValidationError

HEX_COLOR_RE = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

DIRECTION_CHOICES = {"up", "down", "left", "right"}

# key -> expected python type(s) per effect section
EFFECT_KEYS: Dict[str, Dict[str, Any]] = {
    "explode": {"background": str, "color": str, "delay": int, "frames": int, "expansion": int},
    "implode": {"background": str, "delay": int, "frames": int},
    "intensify": {
        "background": str,
        "delay": int,
        "frames": int,
        "intensity": int,
        "seed": int,
    },
    "spin": {"background": str, "delay": int, "angle": int},
    "train": {"delay": int, "min_frames": int, "direction": str},
    "partify": {"background": str, "color": str, "delay": int, "fuzz": int},
    "rotate": {},
    "flip": {},
    "convert": {"directory": str},
}


def is_hex_color(value: str) -> bool:
    return bool(HEX_COLOR_RE.match(value))


def _validate_magick_section(cfg: Any) -> None:
    if not isinstance(cfg, dict):
        raise ValidationError("'magick' section must be a mapping.")
    path = cfg.get("path")
    if path is not None and (not isinstance(path, str) or not path.strip()):
        raise ValidationError("magick.path must be a non-empty string.")
    min_version = cfg.get("min_version")
    if min_version is not None and not isinstance(min_version, (str, int, float)):
        raise ValidationError("magick.min_version must be a version string.")
    timeout = cfg.get("timeout_sec")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout < 0:
            raise ValidationError("magick.timeout_sec must be a non-negative number.")


def _validate_logging_section(cfg: Any) -> None:
    if not isinstance(cfg, dict):
        raise ValidationError("'logging' section must be a mapping.")
    log_dir = cfg.get("dir")
    if log_dir is not None and not isinstance(log_dir, str):
        raise ValidationError("logging.dir must be a string or null.")


def _validate_effect_section(name: str, cfg: Any) -> None:
    if cfg is None:
        return
    if not isinstance(cfg, dict):
        raise ValidationError(f"effects.{name} must be a mapping.")
    allowed = EFFECT_KEYS[name]
    for key, value in cfg.items():
        if key not in allowed:
            raise ValidationError(
                f"Unknown key 'effects.{name}.{key}'. Allowed keys: {sorted(allowed)}."
            )
        expected = allowed[key]
        if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise ValidationError(f"effects.{name}.{key} must be an integer.")
        if expected is str and not isinstance(value, str):
            raise ValidationError(f"effects.{name}.{key} must be a string.")
        if key in ("background", "color") and not is_hex_color(value):
            raise ValidationError(
                f"effects.{name}.{key} must be a HEX color starting with '#'."
            )
        if key == "direction" and value.lower() not in DIRECTION_CHOICES:
            raise ValidationError(
                f"effects.{name}.direction must be one of {sorted(DIRECTION_CHOICES)}."
            )


def validate_config(config: Dict[str, Any]) -> None:
    """Validate the merged configuration structure.

    Range checks (minimum delay and so on) are applied later by the option
    resolver so that config values and flags share one rule set.
    """
    if "magick" in config:
        _validate_magick_section(config["magick"])
    if "logging" in config:
        _validate_logging_section(config["logging"])

    effects = config.get("effects", {})
    if not isinstance(effects, dict):
        raise ValidationError("'effects' section must be a mapping.")
    for name, section in effects.items():
        if name not in EFFECT_KEYS:
            raise ValidationError(
                f"Unknown effect 'effects.{name}'. Known effects: {sorted(EFFECT_KEYS)}."
            )
        _validate_effect_section(name, section)
