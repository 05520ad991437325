from memories_bed.core.download_manager import DownloadManager, download_filename

from tests.conftest import make_item


def test_filename_uses_one_based_index_and_type():
    assert download_filename("Summer Trip", 0, make_item(0)) == "Summer Trip-1.jpg"
    assert download_filename("Summer Trip", 4, make_item(1, "video")) == "Summer Trip-5.mp4"


def test_filename_sanitized():
    assert download_filename('a/b:c?', 1, make_item(0)) == "a_b_c_-2.jpg"
    assert download_filename("", 0, make_item(0)) == "memory-1.jpg"


def test_destination_in_download_dir(tmp_path):
    dm = DownloadManager(tmp_path)
    assert dm.destination_for("Trip", 2, make_item(3, "video")) == tmp_path / "Trip-3.mp4"
