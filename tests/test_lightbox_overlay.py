import pytest
from PyQt6.QtCore import QPoint, Qt
from PyQt6.QtWidgets import QWidget

from memories_bed.ui.gallery.lightbox import LightboxOverlay
from memories_bed.ui.images.zoomable_image import ImageViewerWidget
from memories_bed.viewer.gestures import SwipeOutcome
from memories_bed.viewer.lightbox import LightboxController

from tests.conftest import make_item


@pytest.fixture
def host(qtbot):
    widget = QWidget()
    qtbot.addWidget(widget)
    widget.resize(900, 700)
    widget.show()
    return widget


def make_overlay(host, image_loader, count=4, liked=()):
    controller = LightboxController([make_item(i) for i in range(count)])
    overlay = LightboxOverlay(
        controller,
        host,
        loader=image_loader,
        is_liked=lambda media_id: media_id in liked,
    )
    return controller, overlay


def test_hidden_until_opened(host, image_loader):
    controller, overlay = make_overlay(host, image_loader)
    assert not overlay.isVisible()
    controller.open(1)
    assert overlay.isVisible()
    assert overlay.geometry() == host.rect()
    assert overlay.counter_label.text() == "2 of 4"
    assert isinstance(overlay.viewer_widget, ImageViewerWidget)
    assert "/upload/w_1600,h_1200," in overlay.viewer_widget.url


def test_each_item_gets_fresh_viewer(host, image_loader):
    controller, overlay = make_overlay(host, image_loader)
    controller.open(0)
    first = overlay.viewer_widget
    first.zoom_in()
    overlay.next_btn.click()
    assert overlay.viewer_widget is not first
    assert overlay.viewer_widget.state.transform.is_identity
    assert controller.index == 1


def test_keyboard_navigation(qtbot, host, image_loader):
    controller, overlay = make_overlay(host, image_loader)
    controller.open(0)
    qtbot.keyClick(overlay, Qt.Key.Key_Left)
    assert controller.index == 3
    qtbot.keyClick(overlay, Qt.Key.Key_Right)
    assert controller.index == 0
    qtbot.keyClick(overlay, Qt.Key.Key_Escape)
    assert not controller.is_open
    assert not overlay.isVisible()


def test_dots_jump(host, image_loader):
    controller, overlay = make_overlay(host, image_loader)
    controller.open(0)
    assert len(overlay.dots) == 4
    overlay.dots[2].click()
    assert controller.index == 2


def test_single_item_hides_navigation(host, image_loader):
    controller, overlay = make_overlay(host, image_loader, count=1)
    controller.open(0)
    assert not overlay.prev_btn.isEnabled()
    assert not overlay.next_btn.isEnabled()
    assert overlay.dots == []


def test_too_many_items_hide_dots(host, image_loader):
    controller, overlay = make_overlay(host, image_loader, count=25)
    controller.open(0)
    assert overlay.dots == []
    assert not overlay.dots_host.isVisible()


def test_swipe_navigates(host, image_loader):
    controller, overlay = make_overlay(host, image_loader)
    controller.open(1)
    overlay.touch_start(500, 300)
    overlay.touch_move(420, 305)
    assert overlay.swipe.is_dragging
    assert overlay.touch_end(400, 305) is SwipeOutcome.NEXT
    assert controller.index == 2
    overlay.touch_start(100, 300)
    assert overlay.touch_end(130, 300) is SwipeOutcome.CANCEL
    assert controller.index == 2


def test_backdrop_click_closes(qtbot, host, image_loader):
    controller, overlay = make_overlay(host, image_loader)
    controller.open(0)
    qtbot.mouseClick(overlay, Qt.MouseButton.LeftButton, pos=QPoint(3, 3))
    assert not controller.is_open


def test_backdrop_click_ignored_while_swiping(qtbot, host, image_loader):
    controller, overlay = make_overlay(host, image_loader)
    controller.open(0)
    overlay.touch_start(500, 300)
    overlay.touch_move(400, 300)
    qtbot.mouseClick(overlay, Qt.MouseButton.LeftButton, pos=QPoint(3, 3))
    assert controller.is_open


def test_like_and_download_signals(qtbot, host, image_loader):
    controller, overlay = make_overlay(host, image_loader, liked=("m1",))
    controller.open(1)
    assert overlay.like_btn.property("liked") is True
    with qtbot.waitSignal(overlay.like_toggled) as blocker:
        overlay.like_btn.click()
    assert blocker.args[0].id == "m1"
    with qtbot.waitSignal(overlay.download_requested) as blocker:
        overlay.download_btn.click()
    assert blocker.args[1] == 1


def test_teardown_detaches_from_controller(host, image_loader):
    controller, overlay = make_overlay(host, image_loader)
    overlay.teardown()
    controller.open(0)
    assert overlay.viewer_widget is None
