"""
Share dialog: the gallery's public URL and its QR code.
"""
from pathlib import Path
from typing import Optional
import logging

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton,
    QFileDialog, QApplication,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPixmap
import qtawesome as qta

from memories_bed.core.share import generate_qr_png, public_url
from memories_bed.ui.common.theme import Colors, Fonts, Spacing, Styles
from memories_bed.utils.file_utils import sanitize_filename

logger = logging.getLogger(__name__)


class ShareDialog(QDialog):
    """Shows `{base_url}/view/{code}` with copy and save-QR actions."""

    def __init__(self, code: str, title: str = "", base_url: Optional[str] = None, parent=None):
        super().__init__(parent)
        self.code = code
        self.title = title
        self.url = public_url(code, base_url)
        self.png_bytes = b""

        self.setWindowTitle("Share gallery")
        self.setModal(True)
        self.setStyleSheet(f"QDialog {{ background-color: {Colors.BG_SECONDARY}; }}")
        self._build_ui()
        self._render_qr()

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(Spacing.XXL, Spacing.XXL, Spacing.XXL, Spacing.XXL)
        layout.setSpacing(Spacing.MD)

        heading = QLabel(self.title or "Share this gallery")
        heading.setStyleSheet(Styles.label(Colors.TEXT_PRIMARY, Fonts.SIZE_XXL, Fonts.WEIGHT_SEMIBOLD))
        heading.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(heading)

        self.qr_label = QLabel()
        self.qr_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.qr_label.setStyleSheet(f"background-color: {Colors.TEXT_WHITE}; border-radius: {Spacing.RADIUS_LG}px;")
        layout.addWidget(self.qr_label, 0, Qt.AlignmentFlag.AlignCenter)

        code_label = QLabel(f"Code: {self.code}")
        code_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        code_label.setStyleSheet(Styles.label(Colors.TEXT_SECONDARY, Fonts.SIZE_LG, Fonts.WEIGHT_MEDIUM))
        layout.addWidget(code_label)

        url_row = QHBoxLayout()
        self.url_edit = QLineEdit(self.url)
        self.url_edit.setReadOnly(True)
        self.url_edit.setStyleSheet(Styles.input_field())
        url_row.addWidget(self.url_edit, 1)
        self.copy_btn = QPushButton("Copy")
        self.copy_btn.setIcon(qta.icon('fa5s.copy', color=Colors.TEXT_WHITE))
        self.copy_btn.setStyleSheet(Styles.button_primary())
        self.copy_btn.clicked.connect(self.copy_url)
        url_row.addWidget(self.copy_btn)
        layout.addLayout(url_row)

        actions = QHBoxLayout()
        self.status_label = QLabel()
        self.status_label.setStyleSheet(Styles.status_label())
        actions.addWidget(self.status_label, 1)
        self.save_btn = QPushButton("Save QR")
        self.save_btn.setIcon(qta.icon('fa5s.download', color=Colors.TEXT_PRIMARY))
        self.save_btn.setStyleSheet(Styles.button_secondary())
        self.save_btn.clicked.connect(self._on_save_clicked)
        actions.addWidget(self.save_btn)
        close_btn = QPushButton("Close")
        close_btn.setStyleSheet(Styles.button_secondary())
        close_btn.clicked.connect(self.accept)
        actions.addWidget(close_btn)
        layout.addLayout(actions)

    def _render_qr(self):
        try:
            self.png_bytes = generate_qr_png(self.url)
        except Exception as e:
            logger.error(f"QR generation failed for {self.url}: {e}")
            self.qr_label.setText("QR code unavailable")
            self.save_btn.setEnabled(False)
            return
        pixmap = QPixmap()
        pixmap.loadFromData(self.png_bytes, "PNG")
        self.qr_label.setPixmap(pixmap)

    def copy_url(self):
        QApplication.clipboard().setText(self.url)
        self.status_label.setText("Link copied")

    def default_filename(self) -> str:
        return f"{sanitize_filename(self.title or self.code)}-qr.png"

    def save_png(self, path: Path) -> Path:
        path = Path(path)
        if path.suffix.lower() != ".png":
            path = path.with_suffix(".png")
        path.write_bytes(self.png_bytes)
        logger.info(f"QR code saved to {path}")
        return path

    def _on_save_clicked(self):
        target, _ = QFileDialog.getSaveFileName(
            self,
            "Save QR code",
            str(Path.home() / self.default_filename()),
            "PNG image (*.png)",
        )
        if not target:
            return
        try:
            saved = self.save_png(Path(target))
        except OSError as e:
            logger.error(f"Saving QR code failed: {e}")
            self.status_label.setText("Could not save QR code")
            return
        self.status_label.setText(f"Saved {saved.name}")
