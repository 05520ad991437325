from PyQt6.QtWidgets import QApplication

from memories_bed.ui.share.qr_dialog import ShareDialog


def test_shows_public_url_and_qr(qtbot):
    dialog = ShareDialog("ABC123", "Summer Trip", "https://memories.example/")
    qtbot.addWidget(dialog)
    assert dialog.url_edit.text() == "https://memories.example/view/ABC123"
    assert dialog.png_bytes.startswith(b"\x89PNG")
    assert not dialog.qr_label.pixmap().isNull()
    assert dialog.save_btn.isEnabled()


def test_save_png_forces_suffix(qtbot, tmp_path):
    dialog = ShareDialog("ABC123", "Summer Trip")
    qtbot.addWidget(dialog)
    saved = dialog.save_png(tmp_path / "gallery")
    assert saved.name == "gallery.png"
    assert saved.read_bytes() == dialog.png_bytes


def test_default_filename(qtbot):
    dialog = ShareDialog("ABC123", "Trip: day/1")
    qtbot.addWidget(dialog)
    assert dialog.default_filename() == "Trip_ day_1-qr.png"
    untitled = ShareDialog("ABC123")
    qtbot.addWidget(untitled)
    assert untitled.default_filename() == "ABC123-qr.png"


def test_copy_url(qtbot):
    dialog = ShareDialog("ABC123")
    qtbot.addWidget(dialog)
    dialog.copy_url()
    assert QApplication.clipboard().text() == "http://localhost:3000/view/ABC123"
    assert dialog.status_label.text() == "Link copied"
