"""
Shared HTTP session factory.

The REST client and the image loader use requests sessions; downloads use
an aiohttp session. All of them share one set of limits and timeouts read
from the settings table.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Dict, List, Optional

import aiohttp
import requests
from requests.adapters import HTTPAdapter

from memories_bed import __version__

logger = logging.getLogger(__name__)


USER_AGENT = f"MemoriesBed/{__version__}"

# PostgREST calls
API_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json",
    "Accept-Encoding": "gzip, deflate",
}

# Image and video bytes
MEDIA_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "*/*",
}


def _setting_int(db_manager, key: str, default: int) -> int:
    try:
        return int(db_manager.get_config(key, str(default)))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric setting {key}")
        return default


@dataclass(frozen=True)
class HttpClientConfig:
    per_host: int = 6
    total: int = 32
    connect_timeout: int = 30
    read_timeout: int = 120

    @classmethod
    def from_settings(cls, db_manager) -> "HttpClientConfig":
        return cls(
            per_host=_setting_int(db_manager, "max_connections_per_host", cls.per_host),
            connect_timeout=_setting_int(db_manager, "request_timeout", cls.connect_timeout),
        )


class HttpClient:
    """Hands out configured sessions and closes the sync ones on shutdown."""

    def __init__(self, config: Optional[HttpClientConfig] = None):
        self.config = config or HttpClientConfig()
        self._sessions: List[requests.Session] = []

    def create_sync_session(self, headers: Optional[Dict[str, str]] = None) -> requests.Session:
        session = requests.Session()
        session.headers.update(headers or API_HEADERS)
        adapter = HTTPAdapter(pool_connections=self.config.per_host, pool_maxsize=self.config.total)
        for prefix in ("https://", "http://"):
            session.mount(prefix, adapter)
        self._sessions.append(session)
        return session

    async def create_async_session(
        self,
        headers: Optional[Dict[str, str]] = None,
        total_timeout: Optional[int] = None,
    ) -> aiohttp.ClientSession:
        """Must be awaited on the loop that will use the session; the caller closes it."""
        connector = aiohttp.TCPConnector(
            limit=self.config.total,
            limit_per_host=self.config.per_host,
            family=socket.AF_INET,
        )
        timeout = aiohttp.ClientTimeout(
            total=total_timeout,
            connect=self.config.connect_timeout,
            sock_read=self.config.read_timeout,
        )
        return aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers=headers or MEDIA_HEADERS,
        )

    def close(self):
        sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        if sessions:
            logger.debug(f"Closed {len(sessions)} HTTP session(s)")


def create_http_client_from_settings(db_manager) -> HttpClient:
    return HttpClient(HttpClientConfig.from_settings(db_manager))


# Process-wide instance, installed by CoreContext
_http_client: Optional[HttpClient] = None


def get_http_client() -> Optional[HttpClient]:
    return _http_client


def set_http_client(client: Optional[HttpClient]):
    global _http_client
    _http_client = client
