import logging

from memories_bed.utils.logging_config import LoggerCategory, LoggingManager


def test_defaults_without_database(tmp_path):
    manager = LoggingManager(log_dir=tmp_path / "logs")
    assert (tmp_path / "logs").is_dir()
    assert manager.get_category_level(LoggerCategory.DATABASE) == logging.WARNING
    assert manager.get_category_level(LoggerCategory.VIEWER) == logging.INFO


def test_levels_persisted_per_category(tmp_path, db):
    manager = LoggingManager(log_dir=tmp_path, db_manager=db)
    manager.set_category_level(LoggerCategory.VIDEO_PLAYER, logging.DEBUG)
    assert db.get_config("log_level_video") == "DEBUG"
    assert logging.getLogger("memories_bed.ui.video.video_player").getEffectiveLevel() == logging.DEBUG

    reloaded = LoggingManager(log_dir=tmp_path)
    reloaded.attach_database(db)
    assert reloaded.get_category_level(LoggerCategory.VIDEO_PLAYER) == logging.DEBUG


def test_unknown_level_name_falls_back(tmp_path, db):
    db.set_config("log_level_api", "CHATTY")
    manager = LoggingManager(log_dir=tmp_path, db_manager=db)
    assert manager.get_category_level(LoggerCategory.API) == logging.INFO
