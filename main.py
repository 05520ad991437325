"""
Memories Bed desktop viewer.

    memories-bed [CODE | https://host/view/CODE]
"""
import os
import sys

# Fixed pixel sizes on every display
os.environ["QT_SCALE_FACTOR"] = "1"

import logging
import asyncio
from PyQt6.QtWidgets import QApplication, QSplashScreen
from PyQt6.QtCore import Qt, QtMsgType, qInstallMessageHandler
from PyQt6.QtGui import QPixmap, QPainter, QColor, QFont, QPalette
import qasync

from memories_bed import __version__
from memories_bed.ui.common.theme import Colors

APP_NAME = "Memories Bed"

QT_LOG_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}

# Harmless Qt chatter
QT_IGNORED_MESSAGES = (
    "QFont::setPointSize: Point size <= 0",
    "Could not parse application stylesheet",
)

PALETTE = {
    QPalette.ColorRole.Window: Colors.BG_PRIMARY,
    QPalette.ColorRole.WindowText: Colors.TEXT_PRIMARY,
    QPalette.ColorRole.Base: Colors.BG_SECONDARY,
    QPalette.ColorRole.AlternateBase: Colors.BG_TERTIARY,
    QPalette.ColorRole.ToolTipBase: Colors.BG_TERTIARY,
    QPalette.ColorRole.ToolTipText: Colors.TEXT_PRIMARY,
    QPalette.ColorRole.Text: Colors.TEXT_PRIMARY,
    QPalette.ColorRole.Button: Colors.BG_HOVER,
    QPalette.ColorRole.ButtonText: Colors.TEXT_PRIMARY,
    QPalette.ColorRole.Link: Colors.ACCENT_PRIMARY,
    QPalette.ColorRole.Highlight: Colors.ACCENT_PRIMARY,
    QPalette.ColorRole.HighlightedText: Colors.TEXT_WHITE,
}


def create_splash_screen(app: QApplication) -> QSplashScreen:
    width, height = 400, 250
    pixmap = QPixmap(width, height)
    pixmap.fill(QColor(Colors.BG_PRIMARY))

    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.fillRect(0, 0, width, 4, QColor(Colors.ACCENT_PRIMARY))

    lines = (
        (80, 40, Colors.TEXT_PRIMARY, QFont("Segoe UI", 24, QFont.Weight.Bold), APP_NAME),
        (120, 30, Colors.TEXT_SECONDARY, QFont("Segoe UI", 12), f"v{app.applicationVersion()}"),
    )
    for top, line_height, color, font, text in lines:
        painter.setPen(QColor(color))
        painter.setFont(font)
        painter.drawText(0, top, width, line_height, Qt.AlignmentFlag.AlignCenter, text)
    painter.end()

    splash = QSplashScreen(pixmap)
    splash.setWindowFlags(Qt.WindowType.SplashScreen | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint)
    return splash


def splash_status(splash: QSplashScreen, text: str):
    if splash:
        splash.showMessage(text, Qt.AlignmentFlag.AlignBottom | Qt.AlignmentFlag.AlignHCenter, QColor(Colors.TEXT_MUTED))


def qt_message_handler(mode, context, message):
    """Forward Qt's own diagnostics into the Python log."""
    if any(ignored in message for ignored in QT_IGNORED_MESSAGES):
        return
    logging.getLogger("qt").log(QT_LOG_LEVELS.get(mode, logging.WARNING), message)


def setup_logging(db_manager=None):
    from memories_bed.utils.logging_config import setup_logging as setup_categorized_logging

    logging_manager = setup_categorized_logging(db_manager)
    qInstallMessageHandler(qt_message_handler)
    logging.getLogger(__name__).info(f"{APP_NAME} {__version__} starting")
    return logging_manager


def apply_dark_palette(app: QApplication):
    palette = QPalette()
    for role, color in PALETTE.items():
        palette.setColor(role, QColor(color))
    app.setPalette(palette)


async def async_main(logging_manager, splash: QSplashScreen = None, initial_code: str = None):
    """Build the core context and the window once the qasync loop is running."""
    logger = logging.getLogger(__name__)

    try:
        from memories_bed.core.context import CoreContext
        from memories_bed.ui.images import ImageLoader, set_image_loader
        from memories_bed.ui.window import ViewerWindow
        from memories_bed.utils.file_utils import apply_windows_dark_mode

        app = QApplication.instance()
        app.setEffectEnabled(Qt.UIEffect.UI_FadeTooltip, False)
        app.setEffectEnabled(Qt.UIEffect.UI_AnimateTooltip, False)

        apply_dark_palette(app)

        splash_status(splash, "Connecting...")
        core = CoreContext()
        logging_manager.attach_database(core.db)

        try:
            cache_items = int(core.db.get_config("image_cache_items", "256"))
        except (TypeError, ValueError):
            cache_items = 256
        set_image_loader(ImageLoader(memory_cache_limit=cache_items))

        splash_status(splash, "Opening viewer...")
        main_window = ViewerWindow(core)
        apply_windows_dark_mode(main_window)
        if splash:
            splash.finish(main_window)
        main_window.show()
        if initial_code:
            main_window.open_code(initial_code)

        # Held on the app so neither is garbage collected
        app._main_window = main_window
        app._core_context = core

    except Exception as e:
        logger.exception(f"Startup failed: {e}")
        sys.exit(1)


def main():
    logging_manager = setup_logging()
    logger = logging.getLogger(__name__)
    app = None

    try:
        app = QApplication(sys.argv)
        app.setApplicationName(APP_NAME)
        app.setApplicationVersion(__version__)
        app.setOrganizationName("MemoriesBed")

        splash = create_splash_screen(app)
        splash.show()
        app.processEvents()

        # First positional argument is a gallery code or share link
        args = [a for a in app.arguments()[1:] if not a.startswith("-")]
        initial_code = args[0] if args else None

        loop = qasync.QEventLoop(app)
        asyncio.set_event_loop(loop)
        with loop:
            loop.run_until_complete(async_main(logging_manager, splash, initial_code))
            loop.run_forever()

    except KeyboardInterrupt:
        logger.info("Interrupted")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)
    finally:
        if app is not None:
            from memories_bed.ui.images.image_loader import get_image_loader
            get_image_loader().shutdown()
        logger.info(f"{APP_NAME} closed")


if __name__ == "__main__":
    main()
