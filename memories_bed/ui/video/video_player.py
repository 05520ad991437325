"""
Lightbox video player on libmpv.

VideoPlayerWidget embeds an mpv instance and renders a VideoTransport:
transport commands go to mpv through MpvBackend, and mpv property changes
come back through MPVSignals into the transport's on_* events.
"""
import logging
from typing import Optional

import mpv
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QSlider,
    QFrame, QLabel, QDialog, QGraphicsOpacityEffect, QStackedLayout,
)
from PyQt6.QtCore import Qt, QSize, QTimer, QEvent
import qtawesome as qta

from memories_bed.ui.common.theme import Colors, Fonts, Spacing, Styles
from memories_bed.ui.video.player_controls import MPVSignals, ProgressSlider
from memories_bed.ui.video.volume_store import persist_volume
from memories_bed.viewer.playback import PlaybackState, VideoTransport, format_time

logger = logging.getLogger(__name__)


class MpvBackend:
    """Media backend over a python-mpv player. Volume [0,1] maps to mpv's 0-100."""

    def __init__(self, player: Optional["mpv.MPV"] = None):
        self.player = player
        self.at_end = False

    def play(self) -> None:
        if self.player is None:
            return
        if self.at_end:
            # keep-open leaves the last frame up; restart from the top
            self.player.time_pos = 0  # type: ignore[attr-defined]
            self.at_end = False
        self.player.pause = False  # type: ignore[attr-defined]

    def pause(self) -> None:
        if self.player is None:
            return
        self.player.pause = True  # type: ignore[attr-defined]

    def seek(self, seconds: float) -> None:
        if self.player is None:
            return
        self.player.time_pos = seconds  # type: ignore[attr-defined]
        self.at_end = False

    def set_volume(self, volume: float) -> None:
        if self.player is None:
            return
        self.player.volume = int(round(volume * 100))  # type: ignore[attr-defined]

    def set_muted(self, muted: bool) -> None:
        if self.player is None:
            return
        self.player.mute = bool(muted)  # type: ignore[attr-defined]


class VideoPlayerWidget(QWidget):
    """
    Video viewer for one lightbox item.

    Args:
        url: media URL handed to mpv
        playback: fresh PlaybackState for this item (volume pre-seeded)
        db: settings store used to remember the volume, optional
    """

    def __init__(self, url: str, playback: Optional[PlaybackState] = None, parent=None, *, db=None):
        super().__init__(parent)
        self.url = url
        self._db = db
        self._fullscreen_dialog: Optional[QDialog] = None
        self._home_parent = None
        self._home_layout = None
        self._home_index = -1
        self._leaving_fullscreen = False
        self._terminated = False
        self.player = None

        self.signals = MPVSignals()

        self._hide_timer = QTimer(self)
        self._hide_timer.setSingleShot(True)

        self._controls_opacity = QGraphicsOpacityEffect(self)
        self._controls_opacity.setOpacity(1.0)

        self._build_ui()

        self.backend = MpvBackend()
        self.transport = VideoTransport(
            self.backend,
            state=playback,
            timer=self._hide_timer,
            fullscreen=self,
            on_change=self._render,
        )
        self._hide_timer.timeout.connect(self.transport.on_hide_timeout)
        self._connect_signals()
        self._setup_player()
        self._render(self.transport.state)

    # --------------------------------------------------

    def _build_ui(self):
        self.setObjectName("videoPlayerWidget")
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMouseTracking(True)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        stage = QWidget()
        self._stage = QStackedLayout(stage)

        # mpv renders into this native window
        self.video_frame = QWidget()
        self.video_frame.setObjectName("videoFrame")
        self.video_frame.setAttribute(Qt.WidgetAttribute.WA_NativeWindow)
        self.video_frame.setAttribute(Qt.WidgetAttribute.WA_DontCreateNativeAncestors)
        self.video_frame.setStyleSheet("background-color: black;")
        self.video_frame.setMouseTracking(True)
        self.video_frame.setCursor(Qt.CursorShape.PointingHandCursor)
        self.video_frame.installEventFilter(self)
        self._stage.addWidget(self.video_frame)

        self.error_label = QLabel("Video failed to load")
        self.error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_label.setStyleSheet(Styles.label(Colors.TEXT_SECONDARY, Fonts.SIZE_LG))
        self._stage.addWidget(self.error_label)
        root.addWidget(stage, 1)

        self.controls = QFrame()
        self.controls.setObjectName("videoControls")
        self.controls.setStyleSheet(f"QFrame#videoControls {{ background-color: {Colors.BG_OVERLAY}; }}")
        self.controls.setMouseTracking(True)
        self.controls.installEventFilter(self)
        self.controls.setGraphicsEffect(self._controls_opacity)
        controls_layout = QVBoxLayout(self.controls)
        controls_layout.setContentsMargins(Spacing.MD, Spacing.XS, Spacing.MD, Spacing.SM)
        controls_layout.setSpacing(Spacing.XS)

        self.slider = ProgressSlider()
        self.slider.setObjectName("videoProgressSlider")
        self.slider.seek_requested.connect(self._on_seek_requested)
        controls_layout.addWidget(self.slider)

        ctrl = QHBoxLayout()
        ctrl.setContentsMargins(0, 0, 0, 0)
        ctrl.setSpacing(Spacing.SM)
        controls_layout.addLayout(ctrl)

        self.play_btn = self._make_button("playPauseButton", self.toggle_play)
        ctrl.addWidget(self.play_btn)
        self.back_btn = self._make_button("skipBackButton", self.skip_back)
        self.back_btn.setIcon(qta.icon("fa5s.undo", color=Colors.TEXT_PRIMARY))
        self.back_btn.setToolTip("Back 10s")
        ctrl.addWidget(self.back_btn)
        self.forward_btn = self._make_button("skipForwardButton", self.skip_forward)
        self.forward_btn.setIcon(qta.icon("fa5s.redo", color=Colors.TEXT_PRIMARY))
        self.forward_btn.setToolTip("Forward 10s")
        ctrl.addWidget(self.forward_btn)

        self.mute_btn = self._make_button("volumeButton", self.toggle_mute)
        ctrl.addWidget(self.mute_btn)

        self.volume = QSlider(Qt.Orientation.Horizontal)
        self.volume.setObjectName("volumeSlider")
        self.volume.setRange(0, 100)
        self.volume.setFixedWidth(90)
        self.volume.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.volume.setStyleSheet(Styles.volume_slider())
        self.volume.valueChanged.connect(self._on_volume_changed)
        ctrl.addWidget(self.volume)

        self.time_label = QLabel("0:00 / 0:00")
        self.time_label.setObjectName("videoTimeLabel")
        self.time_label.setStyleSheet(Styles.label(Colors.TEXT_WHITE, Fonts.SIZE_SM))
        ctrl.addWidget(self.time_label)
        ctrl.addStretch(1)

        self.fullscreen_btn = self._make_button("videoFullscreenButton", self.toggle_fullscreen)
        ctrl.addWidget(self.fullscreen_btn)

        root.addWidget(self.controls)

    def _make_button(self, name: str, slot) -> QPushButton:
        btn = QPushButton()
        btn.setObjectName(name)
        btn.setFlat(True)
        btn.setIconSize(QSize(Spacing.ICON_MD, Spacing.ICON_MD))
        btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        btn.setStyleSheet(Styles.button_flat())
        btn.clicked.connect(slot)
        return btn

    def _connect_signals(self):
        self.signals.position.connect(self.transport.on_time_update)
        self.signals.duration.connect(self.transport.on_loaded_metadata)
        self.signals.pause.connect(self._on_pause_changed)
        self.signals.eof.connect(self._on_eof)
        self.signals.error.connect(self.transport.on_error)

    # --------------------------------------------------

    def _setup_player(self):
        state = self.transport.state
        try:
            self.player = mpv.MPV(
                wid=str(int(self.video_frame.winId())),
                osc="no",
                input_default_bindings="no",
                input_vo_keyboard="no",
                keep_open="yes",
                hwdec="auto-safe",
                msg_level="all=no",
            )
        except Exception as e:
            logger.error(f"mpv failed to initialise: {e}")
            self.transport.on_error(str(e))
            return

        self.backend.player = self.player
        self.player.volume = int(round(state.volume * 100))  # type: ignore[attr-defined]
        self.player.mute = state.is_muted  # type: ignore[attr-defined]

        self.player.observe_property("time-pos", self._on_mpv_time)
        self.player.observe_property("duration", self._on_mpv_duration)
        self.player.observe_property("pause", self._on_mpv_pause)
        self.player.observe_property("eof-reached", self._on_mpv_eof)
        self.player.event_callback("end-file")(self._on_mpv_end_file)

        try:
            self.player.pause = True  # type: ignore[attr-defined]
            self.player.play(self.url)
        except Exception as e:
            logger.error(f"mpv could not open {self.url[:80]}: {e}")
            self.transport.on_error(str(e))
            return
        logger.info(f"Video player initialized for {self.url[:80]}")

    # --------------------------------------------------
    # mpv callbacks (mpv event thread)
    # --------------------------------------------------

    def _on_mpv_time(self, _, v):
        if v is None:
            return
        try:
            self.signals.position.emit(float(v))
        except (TypeError, ValueError):
            return

    def _on_mpv_duration(self, _, v):
        if v is None:
            return
        try:
            self.signals.duration.emit(float(v))
        except (TypeError, ValueError):
            return

    def _on_mpv_pause(self, _, v):
        self.signals.pause.emit(bool(v))

    def _on_mpv_eof(self, _, v):
        if v:
            self.signals.eof.emit()

    def _on_mpv_end_file(self, event):
        data = getattr(event, "data", None)
        if getattr(data, "reason", None) == mpv.MpvEventEndFile.ERROR:
            self.signals.error.emit(f"mpv error {getattr(data, 'error', '')}".strip())

    # --------------------------------------------------
    # Transport events (Qt thread)
    # --------------------------------------------------

    def _on_pause_changed(self, paused: bool):
        if self._terminated:
            return
        if paused:
            self.transport.on_pause()
        else:
            self.transport.on_play()

    def _on_eof(self):
        self.backend.at_end = True
        self.transport.on_ended()

    # --------------------------------------------------
    # Commands
    # --------------------------------------------------

    def toggle_play(self):
        self.transport.toggle_play()

    def skip_back(self):
        self.transport.skip_back()

    def skip_forward(self):
        self.transport.skip_forward()

    def toggle_mute(self):
        self.transport.toggle_mute()
        self._remember_volume()

    def toggle_fullscreen(self):
        self.transport.toggle_fullscreen()

    def _on_seek_requested(self, fraction: float):
        self.transport.seek_to(fraction)
        self.transport.pointer_activity()

    def _on_volume_changed(self, value: int):
        self.transport.set_volume(value / 100.0)
        self._remember_volume()

    def _remember_volume(self):
        state = self.transport.state
        persist_volume(self._db, 0.0 if state.is_muted else state.volume)

    # --------------------------------------------------
    # Fullscreen host
    # --------------------------------------------------

    def request_fullscreen(self):
        if self._fullscreen_dialog:
            return
        parent = self.parentWidget()
        layout = parent.layout() if parent else None
        if parent and layout:
            self._home_parent = parent
            self._home_layout = layout
            self._home_index = layout.indexOf(self)
        self._fullscreen_dialog = QDialog(None, Qt.WindowType.FramelessWindowHint | Qt.WindowType.Window)
        self._fullscreen_dialog.setObjectName("videoFullscreen")
        self._fullscreen_dialog.setStyleSheet("background-color: black;")
        dialog_layout = QVBoxLayout(self._fullscreen_dialog)
        dialog_layout.setContentsMargins(0, 0, 0, 0)
        dialog_layout.setSpacing(0)
        self.setParent(self._fullscreen_dialog)
        dialog_layout.addWidget(self)
        self._fullscreen_dialog.installEventFilter(self)
        self._fullscreen_dialog.showFullScreen()
        self.setFocus(Qt.FocusReason.ActiveWindowFocusReason)
        self.transport.on_fullscreen_changed(True)

    def exit_fullscreen(self):
        if not self._fullscreen_dialog or self._leaving_fullscreen:
            return
        self._leaving_fullscreen = True
        self._fullscreen_dialog.removeEventFilter(self)
        self.setParent(self._home_parent)
        if self._home_layout is not None and self._home_index >= 0:
            self._home_layout.insertWidget(self._home_index, self)
        self.show()
        self._fullscreen_dialog.close()
        self._fullscreen_dialog.deleteLater()
        self._fullscreen_dialog = None
        self._home_parent = None
        self._home_layout = None
        self._home_index = -1
        self._leaving_fullscreen = False
        if not self._terminated:
            self.transport.on_fullscreen_changed(False)
            self.setFocus()

    @property
    def is_fullscreen(self) -> bool:
        return self._fullscreen_dialog is not None

    # --------------------------------------------------
    # Rendering
    # --------------------------------------------------

    def _render(self, state: PlaybackState):
        playing_icon = "fa5s.pause" if state.is_playing else "fa5s.play"
        self.play_btn.setIcon(qta.icon(playing_icon, color=Colors.TEXT_PRIMARY))
        self.play_btn.setEnabled(not state.load_failed)

        can_seek = self.transport.can_seek
        self.slider.setEnabled(can_seek)
        self.back_btn.setEnabled(can_seek)
        self.forward_btn.setEnabled(can_seek)
        self.slider.set_fraction(state.progress)
        self.time_label.setText(f"{format_time(state.current_time)} / {format_time(state.duration)}")

        muted = state.is_muted or state.volume == 0
        self.mute_btn.setIcon(qta.icon(
            "fa5s.volume-mute" if muted else "fa5s.volume-up", color=Colors.TEXT_PRIMARY
        ))
        self.volume.blockSignals(True)
        self.volume.setValue(0 if state.is_muted else int(round(state.volume * 100)))
        self.volume.blockSignals(False)

        self.fullscreen_btn.setIcon(qta.icon(
            "fa5s.compress" if state.is_fullscreen else "fa5s.expand", color=Colors.TEXT_PRIMARY
        ))

        self._controls_opacity.setOpacity(1.0 if state.controls_visible else 0.0)
        self._stage.setCurrentWidget(self.error_label if state.load_failed else self.video_frame)

    # --------------------------------------------------
    # Input
    # --------------------------------------------------

    def eventFilter(self, obj, event):
        if self._terminated:
            return super().eventFilter(obj, event)
        if obj in (self.video_frame, self.controls):
            if event.type() in (QEvent.Type.MouseMove, QEvent.Type.Enter):
                self.transport.pointer_activity()
            elif (
                obj is self.video_frame
                and event.type() == QEvent.Type.MouseButtonPress
                and event.button() == Qt.MouseButton.LeftButton
            ):
                self.transport.pointer_activity()
                self.toggle_play()
                return True
        if obj is self._fullscreen_dialog:
            if event.type() in (QEvent.Type.Close, QEvent.Type.Hide):
                QTimer.singleShot(0, self.exit_fullscreen)
            elif event.type() == QEvent.Type.WindowStateChange:
                if self._fullscreen_dialog and not self._fullscreen_dialog.isFullScreen():
                    QTimer.singleShot(0, self.exit_fullscreen)
        return super().eventFilter(obj, event)

    def mouseMoveEvent(self, event):
        self.transport.pointer_activity()
        super().mouseMoveEvent(event)

    def leaveEvent(self, event):
        # Pointer gone: hide right away if playing
        self.transport.on_hide_timeout()
        super().leaveEvent(event)

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_Space:
            self.toggle_play()
            event.accept()
            return
        if key == Qt.Key.Key_M:
            self.toggle_mute()
            event.accept()
            return
        if key == Qt.Key.Key_F:
            self.toggle_fullscreen()
            event.accept()
            return
        if key == Qt.Key.Key_Escape and self._fullscreen_dialog:
            self.exit_fullscreen()
            event.accept()
            return
        super().keyPressEvent(event)

    # --------------------------------------------------

    def cleanup(self):
        """Release mpv and stop timers. Safe to call twice."""
        if self._terminated:
            return
        self._terminated = True
        self.transport.teardown()
        self._hide_timer.stop()
        if self._fullscreen_dialog:
            self.exit_fullscreen()
        self.backend.player = None
        if self.player is not None:
            try:
                self.player.terminate()
            except Exception as e:
                logger.debug(f"mpv terminate failed: {e}")
            self.player = None
