from pathlib import Path
import sys

import pytest
import yaml

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from magickfx.config import load_config, load_default_config, load_effective_config, merge_configs
from magickfx.exceptions import ValidationError


def test_default_config_covers_every_effect():
    config = load_default_config()
    assert set(config["effects"]) == {
        "explode", "implode", "intensify", "spin", "train", "partify", "rotate", "flip", "convert",
    }
    assert config["magick"]["path"] == "magick"


def test_user_config_overrides_only_given_keys(tmp_path):
    user = tmp_path / "fx.yaml"
    user.write_text(
        yaml.safe_dump({"effects": {"spin": {"angle": 10}}, "magick": {"timeout_sec": 30}}),
        encoding="utf-8",
    )
    config = load_effective_config(str(user))
    assert config["effects"]["spin"]["angle"] == 10
    assert config["effects"]["spin"]["delay"] == 50
    assert config["magick"]["timeout_sec"] == 30
    assert config["magick"]["path"] == "magick"


def test_config_env_var_is_used(tmp_path, monkeypatch):
    user = tmp_path / "fx.yaml"
    user.write_text("effects:\n  train:\n    direction: up\n", encoding="utf-8")
    monkeypatch.setenv("MAGICKFX_CONFIG", str(user))
    assert load_effective_config()["effects"]["train"]["direction"] == "up"


def test_invalid_yaml_reports_position(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("effects:\n  spin: [1, 2\n", encoding="utf-8")
    with pytest.raises(ValidationError) as exc:
        load_config(str(bad))
    assert exc.value.line_number is not None


def test_missing_config_file():
    with pytest.raises(ValidationError):
        load_config("/nonexistent/magickfx.yaml")


@pytest.mark.parametrize(
    "override",
    [
        {"effects": {"spin": {"speed": 3}}},
        {"effects": {"sparkle": {}}},
        {"effects": {"explode": {"color": "red"}}},
        {"effects": {"explode": {"frames": "20"}}},
        {"effects": {"train": {"direction": "diagonal"}}},
        {"magick": {"timeout_sec": -1}},
    ],
)
def test_invalid_config_values_are_rejected(tmp_path, override):
    user = tmp_path / "fx.yaml"
    user.write_text(yaml.safe_dump(override), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_effective_config(str(user))


def test_merge_configs_does_not_mutate_inputs():
    base = {"a": {"b": 1, "c": 2}}
    merged = merge_configs(base, {"a": {"b": 5}})
    assert merged == {"a": {"b": 5, "c": 2}}
    assert base == {"a": {"b": 1, "c": 2}}
