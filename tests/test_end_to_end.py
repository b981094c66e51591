"""Runs the real ImageMagick binary; skipped when it is not installed."""

import asyncio
from pathlib import Path
import shutil
import sys

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from magickfx import main as cli
from magickfx.effects.partify import PARTY_COLORS

pytestmark = pytest.mark.skipif(shutil.which("magick") is None, reason="ImageMagick 7 not installed")


def _png(path: Path, size=(40, 20), color=(0, 0, 0, 255)) -> Path:
    Image.new("RGBA", size, color).save(path)
    return path


def test_rotate_90_creates_new_file(tmp_path):
    source = _png(tmp_path / "bar.png")
    assert asyncio.run(cli.main(["rotate", "-d", "90", str(source)])) == 0

    rotated = tmp_path / "bar_rotated.png"
    assert rotated.exists() and rotated != source
    with Image.open(rotated) as im:
        assert im.size == (20, 40)
    with Image.open(source) as im:
        assert im.size == (40, 20)


def test_flip_in_place_keeps_single_file(tmp_path):
    source = _png(tmp_path / "bar.png")
    assert asyncio.run(cli.main(["flip", "-v", "-i", str(source)])) == 0
    assert [p.name for p in tmp_path.iterdir()] == ["bar.png"]


def test_spin_frame_count(tmp_path):
    source = _png(tmp_path / "dot.png", size=(16, 16))
    assert asyncio.run(cli.main(["spin", "-a", "90", str(source)])) == 0
    with Image.open(tmp_path / "dot_spinning.gif") as im:
        assert im.n_frames == 4


def test_partify_keeps_one_palette_pass(tmp_path):
    source = _png(tmp_path / "blob.png", size=(16, 16))
    assert asyncio.run(cli.main(["partify", str(source)])) == 0
    with Image.open(tmp_path / "blob_party.gif") as im:
        assert im.n_frames == len(PARTY_COLORS)
