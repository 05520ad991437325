import pytest

from memories_bed.core.api.base import APIError
from memories_bed.core.folders_manager import (
    CommentsDisabledError, FoldersManager, GalleryNotFoundError,
)

from tests.conftest import make_gallery


class FakeClient:
    def __init__(self, folders=None, legacy=None, media=None, comments=None):
        self.folders = folders or {}
        self.legacy = legacy or {}
        self.media = media or {}
        self.comments = comments or []
        self.view_updates = []
        self.added = []
        self.fail_views = False

    def get_folder_by_code(self, code):
        return self.folders.get(code)

    def get_folder_media(self, folder_id):
        return self.media.get(("folder", folder_id), [])

    def get_legacy_memory_by_code(self, code):
        return self.legacy.get(code)

    def get_legacy_media(self, memory_id):
        return self.media.get(("legacy", memory_id), [])

    def update_view_count(self, table, record_id, view_count):
        if self.fail_views:
            raise APIError("down")
        self.view_updates.append((table, record_id, view_count))

    def get_comments(self, table, parent_key, parent_id):
        return [dict(c, table=table, parent_key=parent_key) for c in self.comments]

    def add_comment(self, table, parent_key, parent_id, name, comment):
        self.added.append((table, parent_key, parent_id, name, comment))
        return {"id": "c9", "name": name, "comment": comment, "created_at": "2024-05-01T00:00:00Z"}


def media_row(id, type="image", order=0, url="https://x/upload/a.jpg"):
    return {"id": id, "media_type": type, "media_url": url, "order_index": order}


def test_loads_folder_and_sorts_media():
    client = FakeClient(
        folders={"ABC123": {"id": "f1", "code": "abc123", "title": "Trip", "view_count": "3"}},
        media={("folder", "f1"): [media_row("b", order=2), media_row("a", "video", order=1)]},
    )
    gallery = FoldersManager(client).load_gallery(" abc123 ")
    assert gallery.folder.code == "ABC123"
    assert gallery.folder.view_count == 3
    assert gallery.folder.allow_downloads is True
    assert not gallery.legacy
    assert [m.id for m in gallery.media] == ["a", "b"]
    assert gallery.media[0].is_video


def test_falls_back_to_legacy_memory():
    client = FakeClient(
        legacy={"OLD111": {"id": "m1", "code": "OLD111", "title": None, "allow_comments": False}},
        media={("legacy", "m1"): [media_row("x")]},
    )
    gallery = FoldersManager(client).load_gallery("OLD111")
    assert gallery.legacy
    assert gallery.folder.title == "Untitled"
    assert gallery.folder.allow_comments is False
    assert len(gallery.media) == 1


def test_unknown_code_not_found():
    with pytest.raises(GalleryNotFoundError) as excinfo:
        FoldersManager(FakeClient()).load_gallery("NOPE12")
    assert excinfo.value.status == 404


def test_invalid_code_rejected_before_request():
    with pytest.raises(ValueError):
        FoldersManager(FakeClient()).load_gallery("bad")


def test_bad_media_rows_dropped():
    client = FakeClient(
        folders={"ABC123": {"id": "f1", "code": "ABC123"}},
        media={("folder", "f1"): [media_row("ok"), media_row("gif", type="gif"), media_row("nourl", url="")]},
    )
    gallery = FoldersManager(client).load_gallery("ABC123")
    assert [m.id for m in gallery.media] == ["ok"]


def test_record_view_writes_next_value():
    client = FakeClient()
    manager = FoldersManager(client)
    assert manager.record_view(make_gallery(view_count=7))
    assert client.view_updates == [("memory_folders", "f1", 8)]
    assert manager.record_view(make_gallery(view_count=0, legacy=True))
    assert client.view_updates[-1][0] == "memories"


def test_record_view_never_raises():
    client = FakeClient()
    client.fail_views = True
    assert FoldersManager(client).record_view(make_gallery()) is False


def test_comments_target_by_gallery_kind():
    client = FakeClient(comments=[{"id": 1, "name": "Ana", "comment": "Lovely"}])
    manager = FoldersManager(client)
    comments = manager.list_comments(make_gallery(legacy=True))
    assert comments[0].id == "1"
    assert comments[0].comment == "Lovely"
    manager.add_comment(make_gallery(), "  Bo ", " Nice ")
    assert client.added == [("folder_comments", "folder_id", "f1", "Bo", "Nice")]


def test_add_comment_validation():
    manager = FoldersManager(FakeClient())
    with pytest.raises(CommentsDisabledError):
        manager.add_comment(make_gallery(allow_comments=False), "Ana", "Hi")
    with pytest.raises(ValueError):
        manager.add_comment(make_gallery(), "Ana", "   ")
