"""
Comments list and the name + comment form under the gallery grid.
"""
from typing import List
import logging

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame, QLabel, QLineEdit, QPushButton, QTextEdit, QVBoxLayout,
    QHBoxLayout, QWidget,
)

from memories_bed.core.dto.comment import CommentDTO
from memories_bed.ui.common.theme import Colors, Fonts, Spacing, Styles
from memories_bed.ui.common.utils import format_date

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 80


class CommentCard(QFrame):
    def __init__(self, comment: CommentDTO, parent=None):
        super().__init__(parent)
        self.comment = comment
        self.setObjectName("commentCard")
        self.setStyleSheet(
            f"QFrame#commentCard {{ background-color: {Colors.BG_SECONDARY};"
            f" border-radius: {Spacing.RADIUS_LG}px; }}"
        )
        layout = QVBoxLayout(self)
        layout.setContentsMargins(Spacing.MD, Spacing.SM, Spacing.MD, Spacing.SM)
        layout.setSpacing(Spacing.XS)

        head = QHBoxLayout()
        name = QLabel(comment.name)
        name.setStyleSheet(Styles.label(Colors.TEXT_PRIMARY, Fonts.SIZE_MD, Fonts.WEIGHT_SEMIBOLD))
        head.addWidget(name)
        head.addStretch()
        date = QLabel(format_date(comment.created_at))
        date.setStyleSheet(Styles.label(Colors.TEXT_MUTED, Fonts.SIZE_XS))
        head.addWidget(date)
        layout.addLayout(head)

        body = QLabel(comment.comment)
        body.setWordWrap(True)
        body.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        body.setStyleSheet(Styles.label(Colors.TEXT_SECONDARY, Fonts.SIZE_MD))
        layout.addWidget(body)


class CommentsPanel(QWidget):
    """
    Signals:
        submit_requested(name, text): trimmed, both non-empty
    """

    submit_requested = pyqtSignal(str, str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("commentsPanel")
        self.comments: List[CommentDTO] = []
        self.cards: List[CommentCard] = []
        self._build_ui()

    def _build_ui(self):
        root = QVBoxLayout(self)
        root.setContentsMargins(Spacing.XXL, Spacing.LG, Spacing.XXL, Spacing.XXL)
        root.setSpacing(Spacing.MD)

        self.title_label = QLabel("Comments")
        self.title_label.setStyleSheet(Styles.label(Colors.TEXT_PRIMARY, Fonts.SIZE_XXL, Fonts.WEIGHT_SEMIBOLD))
        root.addWidget(self.title_label)

        self.name_input = QLineEdit()
        self.name_input.setPlaceholderText("Your name")
        self.name_input.setMaxLength(MAX_NAME_LENGTH)
        self.name_input.setStyleSheet(Styles.input_field())
        root.addWidget(self.name_input)

        self.text_input = QTextEdit()
        self.text_input.setPlaceholderText("Leave a comment…")
        self.text_input.setAcceptRichText(False)
        self.text_input.setMinimumHeight(Spacing.MULTILINE_MIN_HEIGHT)
        self.text_input.setMaximumHeight(Spacing.MULTILINE_MAX_HEIGHT)
        self.text_input.setStyleSheet(Styles.input_field())
        root.addWidget(self.text_input)

        actions = QHBoxLayout()
        self.status_label = QLabel()
        self.status_label.setStyleSheet(Styles.status_label())
        actions.addWidget(self.status_label, 1)
        self.submit_btn = QPushButton("Post comment")
        self.submit_btn.setStyleSheet(Styles.button_primary())
        self.submit_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.submit_btn.clicked.connect(self._on_submit)
        actions.addWidget(self.submit_btn)
        root.addLayout(actions)

        self.list_layout = QVBoxLayout()
        self.list_layout.setSpacing(Spacing.SM)
        root.addLayout(self.list_layout)

        self.empty_label = QLabel("No comments yet. Be the first!")
        self.empty_label.setStyleSheet(Styles.label(Colors.TEXT_MUTED, Fonts.SIZE_MD))
        root.addWidget(self.empty_label)

    # ------------------------------------------------------------------

    def set_comments(self, comments: List[CommentDTO]):
        for card in self.cards:
            self.list_layout.removeWidget(card)
            card.deleteLater()
        self.cards = []
        self.comments = list(comments)
        for comment in self.comments:
            card = CommentCard(comment)
            self.list_layout.addWidget(card)
            self.cards.append(card)
        self._refresh_header()

    def prepend_comment(self, comment: CommentDTO):
        self.comments.insert(0, comment)
        card = CommentCard(comment)
        self.list_layout.insertWidget(0, card)
        self.cards.insert(0, card)
        self._refresh_header()

    def _refresh_header(self):
        count = len(self.comments)
        self.title_label.setText(f"Comments ({count})" if count else "Comments")
        self.empty_label.setVisible(count == 0)

    def set_busy(self, busy: bool):
        self.submit_btn.setEnabled(not busy)
        self.submit_btn.setText("Posting…" if busy else "Post comment")

    def set_status(self, message: str, error: bool = False):
        color = Colors.ACCENT_ERROR if error else Colors.TEXT_SECONDARY
        self.status_label.setStyleSheet(Styles.label(color, Fonts.SIZE_SM))
        self.status_label.setText(message)

    def clear_form(self):
        self.text_input.clear()
        self.set_status("")

    def _on_submit(self):
        name = self.name_input.text().strip()
        text = self.text_input.toPlainText().strip()
        if not name or not text:
            self.set_status("Name and comment are required", error=True)
            return
        self.set_status("")
        self.submit_requested.emit(name, text)
