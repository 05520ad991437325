from memories_bed.ui.images.zoomable_image import ImageViewerWidget
from memories_bed.viewer.image_transform import ImageViewState


def test_loads_image(qtbot, image_loader):
    widget = ImageViewerWidget("https://x/upload/a.jpg", loader=image_loader)
    qtbot.addWidget(widget)
    qtbot.waitUntil(lambda: widget.view.pixmap_item is not None)
    assert not widget.failed
    assert widget.zoom_label.text() == "100%"


def test_failed_load(qtbot, image_loader):
    widget = ImageViewerWidget("https://x/broken.jpg", loader=image_loader)
    qtbot.addWidget(widget)
    with qtbot.waitSignal(widget.load_failed, timeout=3000):
        pass
    assert widget.failed


def test_toolbar_commands_drive_state(qtbot, image_loader):
    state = ImageViewState()
    widget = ImageViewerWidget("https://x/upload/a.jpg", state, loader=image_loader)
    qtbot.addWidget(widget)
    widget.zoom_in_btn.click()
    assert widget.zoom_label.text() == "120%"
    widget.rotate_btn.click()
    assert state.transform.rotation == 90
    widget.reset_btn.click()
    assert state.transform.is_identity
    assert widget.zoom_label.text() == "100%"


def test_cache_hit_renders_immediately(qtbot, image_loader):
    first = ImageViewerWidget("https://x/upload/a.jpg", loader=image_loader)
    qtbot.addWidget(first)
    qtbot.waitUntil(lambda: first.view.pixmap_item is not None)
    second = ImageViewerWidget("https://x/upload/a.jpg", loader=image_loader)
    qtbot.addWidget(second)
    assert second.view.pixmap_item is not None
    assert image_loader.requested == ["https://x/upload/a.jpg"]


def test_zoom_label_tracks_every_level(qtbot, image_loader):
    widget = ImageViewerWidget("https://x/upload/a.jpg", loader=image_loader)
    qtbot.addWidget(widget)
    assert widget.zoom_label.text() == "100%"
    widget.zoom_in()
    widget.zoom_out()
    assert widget.zoom_label.text() == "100%"
    widget.zoom_out()
    assert widget.zoom_label.text() == "83%"
