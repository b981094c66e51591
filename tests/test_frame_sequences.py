from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from magickfx.effects import get_effect
from magickfx.effects.intensify import shake_offsets
from magickfx.effects.partify import PARTY_COLORS, palette_cycle
from magickfx.effects.spin import spin_angles
from magickfx.effects.train import roll_offsets
from magickfx.exceptions import OptionError
from magickfx.operations import DrawPoint, Extent, Fill, Implode, Opaque, Resize, Roll, Rotate, Shift
from magickfx.options import Direction, EffectOptions
from magickfx.utils.magick_probe import SourceImage

SOURCE = SourceImage(path=Path("cat.png"), width=100, height=80)


def _ops_of(frames, op_type):
    return [op for frame in frames for op in frame.operations if isinstance(op, op_type)]


@pytest.mark.parametrize("effect_name", ["explode", "implode", "intensify"])
@pytest.mark.parametrize("frame_count", [1, 2, 20])
def test_frame_count_yields_one_fewer_clone(effect_name, frame_count):
    options = EffectOptions(
        background="#00000000", color="#FF0000", frames=frame_count, rate=5
    )
    frames = get_effect(effect_name).build_frames(options, SOURCE)
    assert len(frames) == frame_count - 1
    assert [f.index for f in frames] == list(range(1, frame_count))


def test_explode_doubles_negative_intensity_and_chains_frames():
    options = EffectOptions(color="#FF0000", frames=5, rate=5)
    frames = get_effect("explode").build_frames(options, SOURCE)

    assert [op.amount for op in _ops_of(frames, Implode)] == [-1, -2, -4, -8]
    assert [f.source for f in frames] == [0, 1, 2, 3]
    assert _ops_of(frames, Resize)[0] == Resize(105)
    assert _ops_of(frames, Extent)[0] == Extent(100, 80)
    assert _ops_of(frames, DrawPoint)[0] == DrawPoint("#FF0000", 50, 40)


def test_implode_doubles_positive_intensity():
    frames = get_effect("implode").build_frames(EffectOptions(frames=4), SOURCE)
    assert [op.amount for op in _ops_of(frames, Implode)] == [1, 2, 4]
    assert frames[0].to_args() == ["(", "-clone", "0", "-gravity", "center", "-implode", "+1", ")"]


def test_shake_offsets_stay_within_intensity_bounds():
    offsets = shake_offsets(200, 100, 10, 500, seed=3)
    assert len(offsets) == 500
    assert all(abs(dx) < 20 and abs(dy) < 10 for dx, dy in offsets)
    assert any(dx < 0 for dx, _ in offsets) and any(dx > 0 for dx, _ in offsets)


def test_shake_offsets_are_reproducible_with_seed():
    assert shake_offsets(200, 100, 10, 30, seed=42) == shake_offsets(200, 100, 10, 30, seed=42)


def test_shake_on_tiny_image_does_not_move():
    assert shake_offsets(10, 10, 5, 3, seed=1) == [(0, 0)] * 3


def test_intensify_frames_shift_from_the_source():
    options = EffectOptions(frames=4, rate=5, seed=7)
    frames = get_effect("intensify").build_frames(options, SOURCE)
    assert all(f.source == 0 for f in frames)
    shift = _ops_of(frames, Shift)[0]
    assert shift.to_args()[:2] == ["-distort", "SRT"]
    assert shift.to_args()[2].startswith("0,0 1 0 ")


def test_spin_angles_clockwise_and_counter_clockwise():
    assert spin_angles(90) == [90, 180, 270]
    assert spin_angles(90, clockwise=False) == [270, 180, 90]
    assert len(spin_angles(5)) == 360 // 5 - 1


def test_spin_rejects_non_factor_step():
    with pytest.raises(ValueError):
        spin_angles(7)


def test_spin_frames_rotate_the_source():
    frames = get_effect("spin").build_frames(EffectOptions(angle=120, clockwise=True), SOURCE)
    assert [f.operations for f in frames] == [(Rotate(120),), (Rotate(240),)]


@pytest.mark.parametrize(
    "direction, first, last",
    [
        (Direction.RIGHT, (5, 0), (95, 0)),
        (Direction.LEFT, (-5, 0), (-95, 0)),
        (Direction.DOWN, (0, 4), (0, 76)),
        (Direction.UP, (0, -4), (0, -76)),
    ],
)
def test_roll_offsets_traverse_the_image_once(direction, first, last):
    offsets = roll_offsets(100, 80, 20, direction)
    assert len(offsets) == 19
    assert offsets[0] == first
    assert offsets[-1] == last


def test_roll_offsets_truncated_increment_adds_frames():
    # 103 // 20 == 5, and 103 // 5 == 20 frames in total
    assert len(roll_offsets(103, 80, 20, Direction.RIGHT)) == 19
    # 110 // 20 == 5, 110 // 5 == 22 frames in total
    assert len(roll_offsets(110, 80, 20, Direction.RIGHT)) == 21


def test_roll_offsets_reject_image_smaller_than_min_frames():
    with pytest.raises(OptionError) as exc:
        roll_offsets(10, 80, 20, Direction.RIGHT)
    assert exc.value.option == "-f"


def test_train_frames_roll_the_source():
    options = EffectOptions(frames=20, direction=Direction.RIGHT)
    frames = get_effect("train").build_frames(options, SOURCE)
    assert frames[1].operations == (Roll(10, 0),)
    assert Roll(-5, 0).to_args() == ["-roll", "-5+0"]


def test_partify_cycles_palette_twice_minus_source():
    colors = palette_cycle()
    assert len(colors) == 2 * len(PARTY_COLORS) - 1
    assert colors[: len(PARTY_COLORS)] == list(PARTY_COLORS)
    # frames that survive stripping: clone 9 onwards
    survivors = colors[len(PARTY_COLORS) - 1 :]
    assert len(survivors) == len(PARTY_COLORS)
    assert set(survivors) == set(PARTY_COLORS)


def test_partify_frames_replace_target_color():
    options = EffectOptions(color="#000000", fuzz=10)
    frames = get_effect("partify").build_frames(options, SOURCE)
    assert len(frames) == 17
    assert frames[0].operations == (Fill("#FF6B6B"), Opaque("#000000"), frames[0].operations[2])
    assert frames[0].to_args()[-3:] == ["-fuzz", "10%", ")"]
