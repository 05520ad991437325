from memories_bed.core.dto.comment import CommentDTO
from memories_bed.ui.gallery.comments_panel import CommentsPanel


def comment(n):
    return CommentDTO(id=str(n), name=f"Guest {n}", comment=f"Note {n}", created_at="2024-05-01T08:00:00Z")


def test_lists_comments(qtbot):
    panel = CommentsPanel()
    qtbot.addWidget(panel)
    panel.set_comments([comment(1), comment(2)])
    assert panel.title_label.text() == "Comments (2)"
    assert panel.empty_label.isHidden()
    panel.prepend_comment(comment(3))
    assert panel.comments[0].id == "3"
    assert panel.title_label.text() == "Comments (3)"


def test_empty_state(qtbot):
    panel = CommentsPanel()
    qtbot.addWidget(panel)
    panel.set_comments([])
    assert panel.title_label.text() == "Comments"
    assert not panel.empty_label.isHidden()


def test_submit_requires_both_fields(qtbot):
    panel = CommentsPanel()
    qtbot.addWidget(panel)
    panel.name_input.setText("Ana")
    with qtbot.assertNotEmitted(panel.submit_requested):
        panel.submit_btn.click()
    assert panel.status_label.text() == "Name and comment are required"


def test_submit_emits_trimmed_values(qtbot):
    panel = CommentsPanel()
    qtbot.addWidget(panel)
    panel.name_input.setText("  Ana ")
    panel.text_input.setPlainText(" Beautiful day \n")
    with qtbot.waitSignal(panel.submit_requested) as blocker:
        panel.submit_btn.click()
    assert blocker.args == ["Ana", "Beautiful day"]


def test_busy_state(qtbot):
    panel = CommentsPanel()
    qtbot.addWidget(panel)
    panel.set_busy(True)
    assert not panel.submit_btn.isEnabled()
    panel.set_busy(False)
    assert panel.submit_btn.text() == "Post comment"
