from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from magickfx.composer import compose_animation, compose_mogrify, compose_strip_frames
from magickfx.operations import FrameSpec, Gravity, Implode, Rotate


def test_animation_argv_has_one_subexpression_per_frame():
    frames = [
        FrameSpec(1, 0, (Gravity("center"), Implode(-1))),
        FrameSpec(2, 1, (Gravity("center"), Implode(-2))),
    ]
    args = compose_animation(
        "magick",
        Path("in.png"),
        frames,
        Path("in_exploding.gif"),
        background="#00000000",
        delay_arg="50x1000",
    )
    assert args == [
        "magick", "in.png",
        "-background", "#00000000", "-delay", "50x1000", "-dispose", "Background",
        "(", "-clone", "0", "-gravity", "center", "-implode", "-1", ")",
        "(", "-clone", "1", "-gravity", "center", "-implode", "-2", ")",
        "-loop", "0", "in_exploding.gif",
    ]


def test_settings_precede_source_when_requested():
    args = compose_animation(
        "magick",
        Path("in.png"),
        [FrameSpec(1, 0, (Rotate(180),))],
        Path("out.gif"),
        background=None,
        delay_arg="20x1000",
        source_first=False,
    )
    assert args[:6] == ["magick", "-delay", "20x1000", "-dispose", "Background", "in.png"]
    assert "-background" not in args


def test_hostile_values_stay_single_tokens():
    nasty = Path("a b; rm -rf ~.png")
    args = compose_animation(
        "magick", nasty, [], Path("$(whoami).gif"), background="#000", delay_arg="50x1000"
    )
    assert args[1] == "a b; rm -rf ~.png"
    assert args[-1] == "$(whoami).gif"


def test_strip_frames_deletes_leading_range_in_place():
    args = compose_strip_frames(
        "magick", Path("x_party.gif"), 9, background="#00000000", delay_arg="50x1000"
    )
    assert args[:4] == ["magick", "x_party.gif", "-delete", "0-8"]
    assert args[-3:] == ["-loop", "0", "x_party.gif"]


def test_mogrify_lists_operations_before_files():
    assert compose_mogrify("magick", ["-rotate", "90"], [Path("a.png")]) == [
        "magick", "mogrify", "-rotate", "90", "a.png",
    ]
