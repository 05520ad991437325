import pytest

from memories_bed.ui.video import volume_store


@pytest.fixture(autouse=True)
def clean_cache():
    volume_store.reset_volume_cache()
    yield
    volume_store.reset_volume_cache()


def test_default_without_database():
    assert volume_store.load_saved_volume() == 0.8


def test_reads_percent_from_settings(db):
    db.set_config(volume_store.VOLUME_KEY, "35")
    assert volume_store.load_saved_volume(db) == 0.35


def test_bad_setting_falls_back(db):
    db.set_config(volume_store.VOLUME_KEY, "loud")
    assert volume_store.load_saved_volume(db) == 0.8


def test_persist_updates_cache_and_settings(db):
    volume_store.persist_volume(db, 0.424)
    assert db.get_config(volume_store.VOLUME_KEY) == "42"
    db.set_config(volume_store.VOLUME_KEY, "10")
    # cached for the session
    assert volume_store.load_saved_volume(db) == 0.42


def test_persist_clamps():
    volume_store.persist_volume(None, 3.0)
    assert volume_store.load_saved_volume() == 1.0
