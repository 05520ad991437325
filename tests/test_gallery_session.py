from memories_bed.viewer.gallery import GallerySession, MediaFilter, filter_counts, filter_media

from tests.conftest import make_item


def test_filter_preserves_order(mixed_items):
    assert [m.id for m in filter_media(mixed_items, MediaFilter.IMAGES)] == ["m0", "m2", "m4"]
    assert [m.id for m in filter_media(mixed_items, MediaFilter.VIDEOS)] == ["m1", "m3"]
    assert filter_media(mixed_items, MediaFilter.ALL) == mixed_items


def test_filter_counts(mixed_items):
    counts = filter_counts(mixed_items)
    assert counts[MediaFilter.ALL] == 5
    assert counts[MediaFilter.IMAGES] == 3
    assert counts[MediaFilter.VIDEOS] == 2


def test_parse_falls_back_to_all():
    assert MediaFilter.parse("Videos") is MediaFilter.VIDEOS
    assert MediaFilter.parse("bogus") is MediaFilter.ALL
    assert MediaFilter.parse(None) is MediaFilter.ALL


def test_select_indexes_filtered_sequence(mixed_items):
    session = GallerySession(mixed_items, MediaFilter.VIDEOS)
    session.select(1)
    assert session.lightbox.current_item.id == "m3"
    assert session.lightbox.counter_text == "2 of 2"


def test_changing_filter_closes_open_lightbox(mixed_items):
    session = GallerySession(mixed_items)
    session.select(3)
    assert session.set_filter(MediaFilter.IMAGES) is True
    assert not session.lightbox.is_open
    assert [m.id for m in session.filtered] == ["m0", "m2", "m4"]


def test_setting_same_filter_is_noop(mixed_items):
    session = GallerySession(mixed_items)
    session.select(0)
    assert session.set_filter(MediaFilter.ALL) is False
    assert session.lightbox.is_open


def test_empty_filter_result():
    session = GallerySession([make_item(0), make_item(1)], MediaFilter.VIDEOS)
    assert session.is_empty
    assert session.counts()[MediaFilter.IMAGES] == 2


def test_video_viewer_gets_remembered_volume(mixed_items):
    session = GallerySession(mixed_items, volume_provider=lambda: 0.25)
    viewer = session.select(1)
    assert viewer.kind == "video"
    assert viewer.playback.volume == 0.25
    assert not viewer.playback.is_muted
