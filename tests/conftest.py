import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from memories_bed.core.dto.folder import GalleryDTO, MemoryFolderDTO
from memories_bed.core.dto.media import MediaItem


def make_item(n: int, type: str = "image", **kwargs) -> MediaItem:
    ext = "mp4" if type == "video" else "jpg"
    return MediaItem(
        id=f"m{n}",
        url=kwargs.pop("url", f"https://res.cloudinary.com/demo/{type}/upload/v1/memories/{n}.{ext}"),
        type=type,
        order_index=n,
        **kwargs,
    )


def make_folder(**overrides) -> MemoryFolderDTO:
    values = dict(
        id="f1",
        code="ABC234",
        title="Summer Trip",
        description="Photos from the lake",
        created_at="2024-03-05T10:20:00+00:00",
        updated_at=None,
        allow_comments=True,
        allow_downloads=True,
        thumbnail_url=None,
        qr_code_url=None,
        view_count=7,
    )
    values.update(overrides)
    return MemoryFolderDTO(**values)


def make_gallery(media=None, **folder_overrides) -> GalleryDTO:
    if media is None:
        media = [make_item(0), make_item(1, "video"), make_item(2)]
    return GalleryDTO(folder=make_folder(**folder_overrides), media=list(media))


class FakeKeyring:
    def __init__(self):
        self.store = {}

    def get_password(self, service, name):
        return self.store.get((service, name))

    def set_password(self, service, name, value):
        self.store[(service, name)] = value


@pytest.fixture
def mixed_items():
    # image, video, image, video, image
    return [make_item(i, "video" if i % 2 else "image") for i in range(5)]


@pytest.fixture
def fake_keyring(monkeypatch):
    fake = FakeKeyring()
    monkeypatch.setattr("memories_bed.core.database.keyring", fake)
    return fake


@pytest.fixture
def db(tmp_path, fake_keyring):
    from memories_bed.core.database import DatabaseManager

    manager = DatabaseManager(tmp_path / "data.db")
    manager.connect()
    yield manager
    manager.close()


@pytest.fixture
def png_bytes(qapp):
    from PyQt6.QtCore import QBuffer, QByteArray, QIODevice
    from PyQt6.QtGui import QColor, QImage

    image = QImage(40, 30, QImage.Format.Format_RGB32)
    image.fill(QColor("#667eea"))
    data = QByteArray()
    buf = QBuffer(data)
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buf, "PNG")
    buf.close()
    return bytes(data)


@pytest.fixture
def image_loader(png_bytes):
    """Loader serving one generated PNG for every URL containing no 'broken'."""
    from memories_bed.ui.images.image_loader import ImageLoader

    requested = []

    def fetch(url):
        requested.append(url)
        if "broken" in url:
            raise RuntimeError("HTTP 404")
        return png_bytes

    loader = ImageLoader(fetch=fetch, max_workers=2)
    loader.requested = requested
    yield loader
    loader.shutdown()
