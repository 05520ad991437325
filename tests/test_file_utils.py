import sys

from memories_bed.utils import file_utils
from memories_bed.utils.file_utils import apply_windows_dark_mode, sanitize_filename


def test_sanitize_replaces_reserved_characters():
    assert sanitize_filename('Trip: "Lake"/Day 1?') == "Trip_ _Lake__Day 1_"


def test_sanitize_collapses_whitespace_and_falls_back():
    assert sanitize_filename("  Summer    Trip. ") == "Summer Trip"
    assert sanitize_filename("...") == "memory"
    assert sanitize_filename(None, fallback="gallery") == "gallery"
    assert len(sanitize_filename("x" * 300)) == 120


def test_dark_title_bar_skipped_off_windows(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")

    class NoWindow:
        def winId(self):
            raise AssertionError("winId should not be touched")

    apply_windows_dark_mode(NoWindow())


def test_only_runtime_helpers_exported():
    # frozen-bundle resource lookup was removed along with the build scripts
    assert not hasattr(file_utils, "get_resource_path")
