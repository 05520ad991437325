import pytest

from memories_bed.viewer.gestures import SwipeOutcome, SwipeRecognizer, feedback_opacity


def test_left_swipe_is_next():
    r = SwipeRecognizer()
    r.touch_start(300, 100)
    r.touch_move(200, 105)
    assert r.touch_end(200, 105) is SwipeOutcome.NEXT
    assert not r.active


def test_right_swipe_is_prev():
    r = SwipeRecognizer()
    r.touch_start(100, 100)
    assert r.touch_end(220, 110) is SwipeOutcome.PREV


def test_short_swipe_cancels():
    r = SwipeRecognizer()
    r.touch_start(100, 100)
    assert r.touch_end(60, 100) is SwipeOutcome.CANCEL


def test_vertical_swipe_cancels():
    r = SwipeRecognizer()
    r.touch_start(100, 100)
    assert r.touch_end(20, 300) is SwipeOutcome.CANCEL


def test_dead_zone_before_dragging():
    r = SwipeRecognizer()
    r.touch_start(100, 100)
    assert r.touch_move(95, 100) is False
    assert r.offset == 0.0
    assert r.touch_move(80, 102) is True
    assert r.is_dragging
    assert r.offset == -20


def test_mostly_vertical_move_does_not_drag():
    r = SwipeRecognizer()
    r.touch_start(100, 100)
    assert r.touch_move(80, 160) is False


def test_end_without_start_cancels():
    assert SwipeRecognizer().touch_end(0, 0) is SwipeOutcome.CANCEL


def test_cancel_clears_gesture():
    r = SwipeRecognizer()
    r.touch_start(0, 0)
    r.touch_move(40, 0)
    r.cancel()
    assert not r.is_dragging
    assert r.offset == 0.0


@pytest.mark.parametrize("offset,expected", [(0, 1.0), (-400, 0.75), (800, 0.5), (2000, 0.5)])
def test_feedback_opacity(offset, expected):
    assert feedback_opacity(offset, 800) == pytest.approx(expected)


def test_feedback_opacity_without_width():
    assert feedback_opacity(100, 0) == 1.0
