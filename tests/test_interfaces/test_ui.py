"""Tests for dialog menu and placement helpers."""

import numpy as np

from tpi.core import Pose
from tpi.interfaces import FixedPlacement


def test_show_error_records_notice(dialogs):
    dialogs.show_error("Error", "Something went wrong", icon="abort")

    notice = dialogs.last_notice
    assert notice.title == "Error"
    assert notice.buttons == ["Confirm"]
    assert notice.icon == "abort"
    notice.press(0)  # no callback, nothing happens


def test_two_button_dialog(dialogs):
    calls = []
    dialogs.show_two_button_dialog(
        "Question", "Continue?",
        "Yes", lambda: calls.append("yes"),
        "No", None,
    )

    notice = dialogs.last_notice
    assert notice.buttons == ["Yes", "No"]
    notice.press(1)
    assert calls == []
    notice.press(0)
    assert calls == ["yes"]


def test_last_notice_empty(dialogs):
    assert dialogs.last_notice is None
    assert dialogs.notices == []


def test_fixed_placement_returns_copies():
    placement = FixedPlacement(Pose([0.0, 1.5, 0.6], [0, 0, 0, 1]))
    obj = object()

    pose = placement.find_and_reserve_position(obj)
    pose.position[0] = 5.0

    assert np.allclose(placement.pose.position, [0.0, 1.5, 0.6])
    assert placement.reserved == [obj]


def test_free_up_spot(placement):
    a, b = object(), object()
    placement.find_and_reserve_position(a)
    placement.find_and_reserve_position(b)

    placement.free_up_spot(a)
    placement.free_up_spot(a)

    assert placement.reserved == [b]
