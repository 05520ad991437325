import pytest
from PyQt6.QtCore import QPoint, Qt

from memories_bed.ui.video.player_controls import ProgressSlider


@pytest.fixture
def slider(qtbot):
    widget = ProgressSlider()
    qtbot.addWidget(widget)
    # 200px of visible track between the insets
    widget.resize(200 + 2 * ProgressSlider.GROOVE_INSET, 18)
    widget.show()
    return widget


def test_track_ends_map_to_start_and_end(slider):
    left = slider.groove_rect().left()
    assert slider.fraction_at(left) == 0.0
    assert slider.fraction_at(left + 200) == 1.0
    assert slider.fraction_at(left + 50) == pytest.approx(0.25)


def test_insets_clamp(slider):
    assert slider.fraction_at(2) == 0.0
    assert slider.fraction_at(slider.width() - 2) == 1.0


def test_click_at_middle_requests_half(qtbot, slider):
    middle = QPoint(slider.width() // 2, slider.height() // 2)
    with qtbot.waitSignal(slider.seek_requested, timeout=1000) as blocker:
        qtbot.mouseClick(slider, Qt.MouseButton.LeftButton, pos=middle)
    assert blocker.args[0] == pytest.approx(0.5)
    assert not slider.dragging


def test_progress_ignored_while_dragging(qtbot, slider):
    qtbot.mousePress(slider, Qt.MouseButton.LeftButton, pos=QPoint(slider.groove_rect().left(), 9))
    slider.set_fraction(0.8)
    assert slider.value() == 0
    qtbot.mouseRelease(slider, Qt.MouseButton.LeftButton, pos=QPoint(slider.groove_rect().left(), 9))
    slider.set_fraction(0.8)
    assert slider.value() == 800
