import asyncio
from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from magickfx.exceptions import DependencyError
from magickfx.utils import dependency_checks
from magickfx.utils.dependency_checks import VersionRequirement, ensure_magick_installed
from magickfx.utils.logger import logger


def _fake_version(value):
    async def _get(binary=None):
        return value

    return _get


def test_version_requirement_parses_imagemagick_style_versions():
    assert VersionRequirement.parse("7.1.1-21") == VersionRequirement(7, 1, 1)
    assert VersionRequirement.parse("7").satisfies(VersionRequirement.parse("7.0"))
    assert not VersionRequirement.parse("6.9.12").satisfies(VersionRequirement.parse("7.0"))


def test_missing_magick_raises_with_install_hint():
    with pytest.raises(DependencyError) as exc:
        asyncio.run(ensure_magick_installed(logger, binary="magickfx-no-such-binary"))
    assert "https://imagemagick.org" in str(exc.value)


def test_old_magick_is_rejected(monkeypatch):
    monkeypatch.setattr(dependency_checks, "get_magick_version", _fake_version("6.9.12-98"))
    with pytest.raises(DependencyError) as exc:
        asyncio.run(ensure_magick_installed(logger, min_version="7.0"))
    assert "6.9.12-98" in exc.value.message


def test_current_magick_passes(monkeypatch):
    monkeypatch.setattr(dependency_checks, "get_magick_version", _fake_version("7.1.1-21"))
    assert asyncio.run(ensure_magick_installed(logger)) == "7.1.1-21"
