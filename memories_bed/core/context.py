from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import requests

from memories_bed.core.api import SupabaseClient
from memories_bed.core.database import DatabaseManager
from memories_bed.core.download_manager import DownloadManager
from memories_bed.core.folders_manager import FoldersManager
from memories_bed.core.share import DEFAULT_BASE_URL
from memories_bed.core.http_client import (
    create_http_client_from_settings,
    set_http_client,
)

logger = logging.getLogger(__name__)

ENV_SUPABASE_URL = "MEMORIES_BED_SUPABASE_URL"
ENV_SUPABASE_KEY = "MEMORIES_BED_SUPABASE_KEY"
ENV_BASE_URL = "MEMORIES_BED_BASE_URL"


class BackendConfig:
    """Where the persistence service lives and how to reach it."""

    def __init__(self, supabase_url: str = "", supabase_key: str = "", public_base_url: str = DEFAULT_BASE_URL):
        self.supabase_url = supabase_url
        self.supabase_key = supabase_key
        self.public_base_url = public_base_url or DEFAULT_BASE_URL

    @property
    def configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_settings(cls, db: DatabaseManager, environ=None) -> "BackendConfig":
        """Stored settings, overridden by MEMORIES_BED_* environment variables."""
        env = os.environ if environ is None else environ
        try:
            stored_key = db.get_config("supabase_anon_key", "")
        except Exception as e:
            # key rotated in the keyring; the value must be entered again
            logger.warning(f"Stored anon key could not be decrypted: {e}")
            stored_key = ""
        return cls(
            supabase_url=env.get(ENV_SUPABASE_URL) or db.get_config("supabase_url", ""),
            supabase_key=env.get(ENV_SUPABASE_KEY) or stored_key,
            public_base_url=env.get(ENV_BASE_URL) or db.get_config("public_base_url", DEFAULT_BASE_URL),
        )

    def save(self, db: DatabaseManager) -> None:
        db.set_config("supabase_url", self.supabase_url)
        db.set_config("supabase_anon_key", self.supabase_key, encrypt=True)
        db.set_config("public_base_url", self.public_base_url)


class CoreContext:
    """
    Shared Core dependencies (DB + clients + managers).

    Use a single instance for app lifetime.
    """

    def __init__(
        self,
        *,
        db: Optional[DatabaseManager] = None,
        session: Optional[requests.Session] = None,
        backend: Optional[BackendConfig] = None,
    ):
        self.db = db or DatabaseManager()

        # Connect early so settings can be read
        if self.db.conn is None:
            self.db.connect()

        self._http_client = create_http_client_from_settings(self.db)
        set_http_client(self._http_client)

        self.session = session if session is not None else self._http_client.create_sync_session()

        self.backend = backend or BackendConfig.from_settings(self.db)
        if not self.backend.configured:
            logger.warning(
                f"Backend not configured; set {ENV_SUPABASE_URL} and {ENV_SUPABASE_KEY}"
            )

        try:
            timeout = int(self.db.get_config("request_timeout", "30"))
        except (TypeError, ValueError):
            timeout = 30

        self._client = SupabaseClient(
            self.backend.supabase_url,
            self.backend.supabase_key,
            session=self.session,
            timeout=timeout,
        )
        self.folders = FoldersManager(self._client)

        download_dir = Path(self.db.get_config("download_dir", str(Path.home() / "Downloads" / "MemoriesBed")))
        self.downloads = DownloadManager(download_dir)

        logger.info(f"Core ready - backend: {self.backend.supabase_url or '<unset>'}")

    @property
    def public_base_url(self) -> str:
        return self.backend.public_base_url

    def close(self) -> None:
        if self._http_client:
            self._http_client.close()
        self.session.close()
        self.db.close()
