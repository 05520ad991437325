"""
Persistence API contract.

Clients return plain dict/list payloads; DTO creation belongs to managers.
The UI never calls a client directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import requests
import logging

from memories_bed.core.http_client import API_HEADERS


class APIError(RuntimeError):
    """Raised for backend HTTP / parsing errors."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


logger = logging.getLogger(__name__)


class BaseAPIClient(ABC):
    """
    Core persistence contract.

    Managers depend on this; concrete clients hide the backend's quirks.
    """

    BACKEND: str  # e.g. "supabase"

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, *, timeout: int = 30):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._configure_session()

    # ------------------------------------------------------------------
    # Session / Request helpers
    # ------------------------------------------------------------------

    def _configure_session(self) -> None:
        self.session.headers.update(API_HEADERS)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[int] = None,
    ) -> Any:
        if not self.base_url:
            raise APIError(f"{self.BACKEND} base URL is not configured")

        url = f"{self.base_url}{path}"
        if params:
            logger.info(f"API Request: {method} {url}?{urlencode(params, doseq=True)}")
        else:
            logger.info(f"API Request: {method} {url}")

        req_headers = dict(self.session.headers)
        if headers:
            req_headers.update(headers)

        try:
            resp = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=req_headers,
                timeout=timeout or self.timeout,
            )
            if not resp.ok:
                raise APIError(
                    f"{self.BACKEND} API error {resp.status_code}: {resp.text}",
                    status=resp.status_code,
                )
            # 204 / return=minimal carry no body
            if resp.status_code == 204 or not resp.content:
                return None
            return resp.json()
        except APIError:
            raise
        except Exception as e:
            raise APIError(f"{self.BACKEND} request failed: {e}") from e

    # ------------------------------------------------------------------
    # Galleries
    # ------------------------------------------------------------------

    @abstractmethod
    def get_folder_by_code(self, code: str) -> Optional[dict]:
        """Folder row for `code`, or None when no folder uses it."""

    @abstractmethod
    def get_folder_media(self, folder_id: str) -> List[dict]:
        """Media rows of a folder ordered by order_index."""

    @abstractmethod
    def get_legacy_memory_by_code(self, code: str) -> Optional[dict]:
        """Pre-folder memory row for `code`, or None."""

    @abstractmethod
    def get_legacy_media(self, memory_id: str) -> List[dict]:
        """Media rows of a legacy memory ordered by order_index."""

    @abstractmethod
    def update_view_count(self, table: str, record_id: str, view_count: int) -> None:
        """Write an absolute view counter value (last write wins)."""

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    @abstractmethod
    def get_comments(self, table: str, parent_key: str, parent_id: str) -> List[dict]:
        """Comment rows newest first."""

    @abstractmethod
    def add_comment(self, table: str, parent_key: str, parent_id: str, name: str, comment: str) -> dict:
        """Insert a comment and return the created row."""
