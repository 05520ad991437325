import pytest
from PyQt6.QtCore import Qt

from memories_bed.ui.gallery.gallery_grid import GalleryGridView
from memories_bed.viewer.gallery import GallerySession, MediaFilter

from tests.conftest import make_item


@pytest.fixture
def grid(qtbot, image_loader):
    view = GalleryGridView(loader=image_loader)
    qtbot.addWidget(view)
    view.resize(1000, 700)
    view.show()
    return view


def test_renders_filtered_items(grid, mixed_items):
    grid.set_session(GallerySession(mixed_items))
    assert len(grid.thumbnails) == 5
    assert grid.filter_bar.buttons[MediaFilter.VIDEOS].text() == "Videos (2)"
    assert grid.thumbnails[1].play_badge is not None
    assert grid.thumbnails[0].play_badge is None


def test_video_thumbnails_use_poster_frame(grid, mixed_items):
    grid.set_session(GallerySession(mixed_items))
    assert "/video/upload/so_0/" in grid.thumbnails[1].thumb_url
    assert grid.thumbnails[1].thumb_url.endswith(".jpg")


def test_filter_click_rebuilds(qtbot, grid, mixed_items):
    session = GallerySession(mixed_items)
    grid.set_session(session)
    with qtbot.waitSignal(grid.filter_changed) as blocker:
        grid.filter_bar.buttons[MediaFilter.VIDEOS].click()
    assert blocker.args == [MediaFilter.VIDEOS]
    assert session.filter is MediaFilter.VIDEOS
    assert [t.item.id for t in grid.thumbnails] == ["m1", "m3"]
    assert [t.index for t in grid.thumbnails] == [0, 1]


def test_empty_state_message(grid):
    grid.set_session(GallerySession([make_item(0)], MediaFilter.VIDEOS))
    assert grid.is_empty
    assert grid.empty_label.text() == "No videos in this gallery"


def test_click_reports_filtered_index(qtbot, grid, mixed_items):
    grid.set_session(GallerySession(mixed_items, MediaFilter.IMAGES))
    with qtbot.waitSignal(grid.item_activated) as blocker:
        qtbot.mouseClick(grid.thumbnails[2], Qt.MouseButton.LeftButton)
    assert blocker.args == [2]


def test_failed_thumbnail_shows_placeholder(qtbot, grid):
    grid.set_session(GallerySession([make_item(0, url="https://x/broken.jpg")]))
    thumb = grid.thumbnails[0]
    qtbot.waitUntil(lambda: thumb.failed)


@pytest.mark.parametrize("width,columns", [(300, 1), (500, 2), (1000, 4), (3000, 4)])
def test_column_count(grid, width, columns):
    assert grid.column_count(width) == columns
