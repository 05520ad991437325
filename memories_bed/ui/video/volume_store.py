"""
Remembered player volume.

Stored as a percentage in the settings table and shared by every player
opened during the session; transports work on [0, 1].
"""
import logging
from typing import Optional

logger = logging.getLogger(__name__)

VOLUME_KEY = "video_player_volume"
DEFAULT_VOLUME = 80

_global_volume: Optional[int] = None


def load_saved_volume(db=None) -> float:
    global _global_volume
    if _global_volume is None:
        value = DEFAULT_VOLUME
        if db is not None:
            try:
                value = int(db.get_config(VOLUME_KEY, str(DEFAULT_VOLUME)))
            except (TypeError, ValueError):
                value = DEFAULT_VOLUME
        _global_volume = max(0, min(100, value))
    return _global_volume / 100.0


def persist_volume(db, volume: float) -> None:
    """Remember `volume`; a muted player is remembered as 0."""
    global _global_volume
    value = max(0, min(100, int(round(float(volume) * 100))))
    _global_volume = value
    if db is None:
        return
    try:
        db.set_config(VOLUME_KEY, str(value))
    except Exception as e:
        logger.warning(f"Could not persist volume: {e}")


def reset_volume_cache() -> None:
    global _global_volume
    _global_volume = None
