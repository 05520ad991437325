"""
Categorised logging for Memories Bed.

Every subsystem belongs to a category whose level can be changed at runtime
and is remembered in the settings table as ``log_level_<category>``. Levels
are set on package loggers, so modules below them inherit the level through
the normal logger hierarchy.
"""
import logging
from typing import Dict, Optional, Tuple
from pathlib import Path
from logging.handlers import TimedRotatingFileHandler

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = "memories_bed.log"
LOG_BACKUP_DAYS = 7

NOISY_LIBRARIES = ('urllib3', 'requests', 'aiohttp', 'asyncio', 'PIL')


class LoggerCategory:
    CORE = "core"
    API = "api"
    NETWORK = "network"
    DATABASE = "database"
    DOWNLOAD = "download"
    IMAGE_LOADING = "image"
    VIDEO_PLAYER = "video"
    VIEWER = "viewer"
    UI = "ui"


# category -> (logger names, default level)
CATEGORIES: Dict[str, Tuple[Tuple[str, ...], int]] = {
    LoggerCategory.CORE: (('memories_bed.core',), logging.INFO),
    LoggerCategory.API: (('memories_bed.core.api',), logging.INFO),
    LoggerCategory.NETWORK: (('memories_bed.core.http_client',), logging.INFO),
    LoggerCategory.DATABASE: (('memories_bed.core.database',), logging.WARNING),
    LoggerCategory.DOWNLOAD: (
        ('memories_bed.core.download_manager', 'memories_bed.core.download_worker'),
        logging.INFO,
    ),
    LoggerCategory.IMAGE_LOADING: (('memories_bed.ui.images',), logging.WARNING),
    LoggerCategory.VIDEO_PLAYER: (('memories_bed.ui.video',), logging.INFO),
    LoggerCategory.VIEWER: (('memories_bed.viewer',), logging.INFO),
    LoggerCategory.UI: (
        ('memories_bed.ui', 'memories_bed.ui.gallery', 'memories_bed.ui.share', 'memories_bed.ui.window'),
        logging.WARNING,
    ),
}


def default_log_dir() -> Path:
    return Path.home() / ".memories_bed" / "logs"


def _config_key(category: str) -> str:
    return f'log_level_{category}'


class LoggingManager:
    """Owns the root handlers and the per-category levels"""

    def __init__(self, log_dir: Optional[Path] = None, db_manager=None):
        self.log_dir = log_dir or default_log_dir()
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.db_manager = db_manager
        self._category_levels: Dict[str, int] = {}
        self._read_levels()

    def _read_levels(self):
        for category, (_, default_level) in CATEGORIES.items():
            level = default_level
            if self.db_manager:
                stored = self.db_manager.get_config(_config_key(category), logging.getLevelName(default_level))
                # getLevelName maps unknown names to a "Level X" string
                resolved = logging.getLevelName(stored)
                if isinstance(resolved, int):
                    level = resolved
            self._category_levels[category] = level

    def _apply_levels(self):
        for category, level in self._category_levels.items():
            self._apply_category_level(category, level)

    def attach_database(self, db_manager):
        """Called once the settings database exists; persisted levels win"""
        self.db_manager = db_manager
        self._read_levels()
        self._apply_levels()

    def get_category_level(self, category: str) -> int:
        return self._category_levels.get(category, logging.INFO)

    def set_category_level(self, category: str, level: int):
        self._category_levels[category] = level
        if self.db_manager:
            self.db_manager.set_config(_config_key(category), logging.getLevelName(level))
        self._apply_category_level(category, level)

    def _apply_category_level(self, category: str, level: int):
        names, _ = CATEGORIES.get(category, ((), None))
        for name in names:
            logging.getLogger(name).setLevel(level)

    def setup_logging(self, root_level: int = logging.INFO):
        """Replace the root handlers with a daily rotating file plus stderr."""
        formatter = logging.Formatter(LOG_FORMAT)

        file_handler = TimedRotatingFileHandler(
            self.log_dir / LOG_FILE_NAME,
            when="midnight",
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
        )
        stream_handler = logging.StreamHandler()

        root_logger = logging.getLogger()
        root_logger.setLevel(root_level)
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        for handler in (file_handler, stream_handler):
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)

        self._apply_levels()
        for name in NOISY_LIBRARIES:
            logging.getLogger(name).setLevel(logging.WARNING)


_logging_manager: Optional[LoggingManager] = None


def get_logging_manager(db_manager=None) -> LoggingManager:
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager(db_manager=db_manager)
    return _logging_manager


def setup_logging(db_manager=None) -> LoggingManager:
    """Install handlers on first call and return the shared manager"""
    manager = get_logging_manager(db_manager)
    manager.setup_logging()
    return manager
