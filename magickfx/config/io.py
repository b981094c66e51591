import os
from importlib import resources
from typing import Any, Dict, Optional

import yaml
from yaml import YAMLError

from ..exceptions import ValidationError
from .merge import merge_configs
from .validate import validate_config

CONFIG_ENV_VAR = "MAGICKFX_CONFIG"


def _parse_yaml(text: str, origin: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except YAMLError as e:
        mark = getattr(e, "problem_mark", None) or getattr(e, "mark", None)
        line = mark.line + 1 if mark else None
        column = mark.column + 1 if mark else None
        raise ValidationError(
            f"Invalid YAML syntax in {origin}: {e}",
            line_number=line,
            column_number=column,
        )
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"Top level of {origin} must be a mapping.")
    return data


def load_config(config_path: str) -> Dict[str, Any]:
    """Load a YAML configuration file with friendly validation errors.

    Parameters
    ----------
    config_path: str
        Path to a YAML file (UTF-8).

    Returns
    -------
    Dict[str, Any]

    Raises
    ------
    ValidationError
        When the file is not found or the YAML syntax is invalid.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        raise ValidationError(f"Configuration file not found: {config_path}")
    return _parse_yaml(text, config_path)


def load_default_config() -> Dict[str, Any]:
    """パッケージ同梱の defaults.yaml を読み込む。"""
    text = resources.files("magickfx").joinpath("defaults.yaml").read_text(encoding="utf-8")
    return _parse_yaml(text, "defaults.yaml")


def load_effective_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """既定値にユーザー設定 (引数 > MAGICKFX_CONFIG) を重ねて検証済みの設定を返す。"""
    config = load_default_config()
    user_path = config_path or os.getenv(CONFIG_ENV_VAR)
    if user_path:
        config = merge_configs(config, load_config(user_path))
    validate_config(config)
    return config
