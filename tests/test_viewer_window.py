import logging
import threading

import pytest

from memories_bed.core.download_manager import DownloadManager
from memories_bed.core.dto.comment import CommentDTO
from memories_bed.core.folders_manager import GalleryNotFoundError
from memories_bed.ui.window.viewer_window import ViewerWindow
from memories_bed.viewer.gallery import MediaFilter

from tests.conftest import make_gallery, make_item


class FakeFolders:
    def __init__(self, galleries):
        self.galleries = galleries
        self.views = []
        self.posted = []
        self.hold = threading.Event()
        self.hold.set()

    def load_gallery(self, code):
        if code not in self.galleries:
            raise GalleryNotFoundError(code)
        return self.galleries[code]

    def record_view(self, gallery):
        self.views.append(gallery.folder.code)
        return True

    def list_comments(self, gallery):
        return [CommentDTO(id="c1", name="Ana", comment="So fun", created_at=None)]

    def add_comment(self, gallery, name, text):
        if gallery.folder.code == "ABC234":
            self.hold.wait(5)
        self.posted.append((name, text))
        return CommentDTO(id="c2", name=name, comment=text, created_at=None)


class FakeDownloads:
    def __init__(self, tmp_path):
        self.tmp_path = tmp_path
        self.saved = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def download_media(self, item, title, index, progress_callback=None):
        path = self.tmp_path / f"{index + 1}.jpg"
        path.write_bytes(b"jpeg")
        self.saved.append((item.id, index))
        return path


class FakeCore:
    public_base_url = "https://memories.example"

    def __init__(self, db, folders, tmp_path):
        self.db = db
        self.folders = folders
        self.downloads = DownloadManager(tmp_path)
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def galleries():
    return {
        "ABC234": make_gallery([make_item(i, "video" if i == 1 else "image") for i in range(3)]),
        "NODL99": make_gallery([make_item(0)], code="NODL99", allow_downloads=False, allow_comments=False),
        "XYZ789": make_gallery([make_item(7)], code="XYZ789", title="Winter"),
    }


@pytest.fixture
def window(qtbot, db, galleries, image_loader, tmp_path):
    core = FakeCore(db, FakeFolders(galleries), tmp_path)
    win = ViewerWindow(core, loader=image_loader)
    qtbot.addWidget(win)
    win.show()
    return win


def load(qtbot, window, code):
    assert window.open_code(code)
    qtbot.waitUntil(lambda: window.gallery is not None and window.gallery.folder.code == code)


def test_invalid_code_rejected(window):
    assert window.open_code("12") is False
    assert window.status_label.text() == "Enter a valid 6-character code"


def test_loads_gallery_from_link(qtbot, window):
    load(qtbot, window, "ABC234")
    assert window.code_input.text() == "ABC234"
    assert window.title_label.text() == "Summer Trip"
    assert "3 items" in window.meta_label.text()
    assert "7 views" in window.meta_label.text()
    assert len(window.grid.thumbnails) == 3
    qtbot.waitUntil(lambda: window.core.folders.views == ["ABC234"])
    qtbot.waitUntil(lambda: len(window.comments.comments) == 1)


def test_unknown_code(qtbot, window):
    window.open_code("https://memories.example/view/zzz999")
    qtbot.waitUntil(lambda: window.status_label.text() == "Gallery not found")
    assert window.gallery is None


def test_grid_activation_opens_lightbox(qtbot, window):
    load(qtbot, window, "ABC234")
    window.grid.item_activated.emit(2)
    assert window.lightbox.isVisible()
    assert window.lightbox.counter_label.text() == "3 of 3"


def test_filter_persisted(qtbot, window, db):
    load(qtbot, window, "ABC234")
    window.grid.filter_bar.buttons[MediaFilter.IMAGES].click()
    assert db.get_config("gallery_filter") == "images"
    assert len(window.grid.thumbnails) == 2


def test_like_toggle_stored_locally(qtbot, window, db):
    load(qtbot, window, "ABC234")
    window.session.select(0)
    window.lightbox.like_btn.click()
    assert db.is_liked("m0")
    assert window.lightbox.like_btn.property("liked") is True
    window.lightbox.like_btn.click()
    assert not db.is_liked("m0")


def test_downloads_blocked_when_disallowed(qtbot, window):
    load(qtbot, window, "NODL99")
    assert window.comments_scroll.isHidden()
    assert window._download_media(window.gallery.media[0], 0) is False
    assert window.toast.message == "Downloads are not allowed for this gallery"


def test_comment_posting(qtbot, window):
    load(qtbot, window, "ABC234")
    qtbot.waitUntil(lambda: len(window.comments.comments) == 1)
    window.comments.name_input.setText("Bo")
    window.comments.text_input.setPlainText("Great pics")
    window.comments.submit_btn.click()
    qtbot.waitUntil(lambda: len(window.comments.comments) == 2)
    assert window.comments.comments[0].name == "Bo"
    assert window.core.folders.posted == [("Bo", "Great pics")]


def test_close_releases_core(qtbot, window):
    load(qtbot, window, "ABC234")
    window.close()
    assert window.core.closed


def test_comment_from_previous_gallery_not_shown(qtbot, window):
    folders = window.core.folders
    load(qtbot, window, "ABC234")
    qtbot.waitUntil(lambda: len(window.comments.comments) == 1)
    folders.hold.clear()
    window.comments.name_input.setText("Bo")
    window.comments.text_input.setPlainText("for ABC")
    window.comments.submit_btn.click()

    load(qtbot, window, "XYZ789")
    qtbot.waitUntil(lambda: len(window.comments.comments) == 1)
    assert window.comments.submit_btn.isEnabled()

    window.comments.text_input.setPlainText("for XYZ")
    window.comments.submit_btn.click()
    qtbot.waitUntil(lambda: len(window.comments.comments) == 2)

    folders.hold.set()
    qtbot.waitUntil(lambda: not window._stale_workers)
    assert [c.comment for c in window.comments.comments] == ["for XYZ", "So fun"]
    assert ("Bo", "for ABC") in folders.posted


def test_download_log_counts_filtered_items(qtbot, window, tmp_path, caplog):
    load(qtbot, window, "ABC234")
    window.core.downloads = FakeDownloads(tmp_path)
    window.grid.filter_bar.buttons[MediaFilter.IMAGES].click()
    window.session.select(1)

    with caplog.at_level(logging.INFO, logger="memories_bed.ui.window.viewer_downloads"):
        window.lightbox.download_btn.click()
        qtbot.waitUntil(lambda: window.toast.message == "Download started!")

    assert window.core.downloads.saved == [("m2", 1)]
    assert "Downloading image m2 (2 of 2)" in caplog.text
