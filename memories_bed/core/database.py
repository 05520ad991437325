"""
Local SQLite store for Memories Bed.

Holds the settings table (some values Fernet-encrypted with a key kept in
the OS keyring) and the set of media the user has hearted. Nothing here is
shared with the backend.
"""
import sqlite3
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Dict, Set
from cryptography.fernet import Fernet
import keyring

logger = logging.getLogger(__name__)


def default_data_dir() -> Path:
    return Path.home() / ".memories_bed"


SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS config (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        is_encrypted INTEGER DEFAULT 0,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS liked_media (
        media_id TEXT PRIMARY KEY,
        gallery_code TEXT,
        liked_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_liked_media_gallery ON liked_media(gallery_code)",
)

# Seeded on first run, never overwritten
DEFAULT_CONFIG = {
    'public_base_url': 'http://localhost:3000',
    'gallery_filter': 'all',
    'video_player_volume': '80',
    'download_dir': str(Path.home() / "Downloads" / "MemoriesBed"),
    'image_cache_items': '256',
    'request_timeout': '30',
}


class DatabaseManager:
    """Settings and likes; call connect() before use"""

    VERSION = "1.0.0"
    KEYRING_SERVICE = "MemoriesBed"
    KEYRING_ENTRY = "encryption_key"

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or default_data_dir() / "data.db"
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn: Optional[sqlite3.Connection] = None
        self._encryption_key = self._load_encryption_key()
        self._fernet = Fernet(self._encryption_key)

    def _load_encryption_key(self) -> bytes:
        """
        Fetch the Fernet key from the keyring, minting one on first run.

        A keyring that cannot be read or written still yields a usable key,
        but values encrypted with it will not survive a restart.
        """
        try:
            stored = keyring.get_password(self.KEYRING_SERVICE, self.KEYRING_ENTRY)
        except Exception as e:
            logger.warning(f"Keyring unavailable, using a session key: {e}")
            stored = None
        if stored:
            return stored.encode()

        key = Fernet.generate_key()
        try:
            keyring.set_password(self.KEYRING_SERVICE, self.KEYRING_ENTRY, key.decode())
        except Exception as e:
            logger.error(f"Could not save encryption key to keyring: {e}")
        return key

    def connect(self):
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=30.0)
        self.conn.row_factory = sqlite3.Row
        with self.conn:
            for statement in SCHEMA:
                self.conn.execute(statement)
            seeds = dict(DEFAULT_CONFIG, app_version=self.VERSION)
            self.conn.executemany(
                "INSERT OR IGNORE INTO config (key, value) VALUES (?, ?)",
                seeds.items(),
            )
        logger.debug(f"Opened settings database at {self.db_path}")

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_config(self, key: str, default: Any = None) -> Any:
        """
        Read a setting, decrypting it if it was stored encrypted.

        Raises cryptography's InvalidToken when the keyring key changed
        since the value was written.
        """
        row = self.conn.execute(
            "SELECT value, is_encrypted FROM config WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return default
        if row['is_encrypted']:
            return self._fernet.decrypt(row['value'].encode()).decode()
        return row['value']

    def set_config(self, key: str, value: Any, encrypt: bool = False):
        stored = str(value)
        if encrypt:
            stored = self._fernet.encrypt(stored.encode()).decode()
        with self.conn:
            self.conn.execute(
                """
                INSERT OR REPLACE INTO config (key, value, is_encrypted, updated_at)
                VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                """,
                (key, stored, int(encrypt)),
            )

    def get_all_config(self) -> Dict[str, str]:
        """Plain-text settings only; encrypted rows are left out"""
        rows = self.conn.execute("SELECT key, value FROM config WHERE is_encrypted = 0")
        return {row['key']: row['value'] for row in rows}

    # ------------------------------------------------------------------
    # Likes
    # ------------------------------------------------------------------

    def set_liked(self, media_id: str, liked: bool, gallery_code: Optional[str] = None):
        with self.conn:
            if liked:
                self.conn.execute(
                    "INSERT OR IGNORE INTO liked_media (media_id, gallery_code) VALUES (?, ?)",
                    (media_id, gallery_code),
                )
            else:
                self.conn.execute("DELETE FROM liked_media WHERE media_id = ?", (media_id,))

    def is_liked(self, media_id: str) -> bool:
        row = self.conn.execute("SELECT 1 FROM liked_media WHERE media_id = ?", (media_id,)).fetchone()
        return row is not None

    def get_liked_ids(self, media_ids: Optional[Iterable[str]] = None) -> Set[str]:
        """Liked ids, optionally restricted to `media_ids`"""
        liked = {row['media_id'] for row in self.conn.execute("SELECT media_id FROM liked_media")}
        if media_ids is None:
            return liked
        return liked.intersection(media_ids)

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None
