from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

import requests

from .base import APIError, BaseAPIClient


FOLDERS_TABLE = "memory_folders"
FOLDER_MEDIA_TABLE = "folder_media"
FOLDER_COMMENTS_TABLE = "folder_comments"

LEGACY_TABLE = "memories"
LEGACY_MEDIA_TABLE = "memory_media"
LEGACY_COMMENTS_TABLE = "comments"


class SupabaseClient(BaseAPIClient):
    """PostgREST access to the hosted Supabase project."""

    BACKEND = "supabase"
    REST_PREFIX = "/rest/v1"
    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        *,
        timeout: int = 30,
    ):
        self.api_key = api_key or ""
        super().__init__(base_url, session, timeout=timeout)

    def _configure_session(self) -> None:
        super()._configure_session()
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })
        if self.api_key:
            self.session.headers.update({
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
            })

    # --------------------------------------------------
    # Query helpers
    # --------------------------------------------------

    def _table(self, table: str) -> str:
        return f"{self.REST_PREFIX}/{table}"

    def _select(
        self,
        table: str,
        filters: Dict[str, Any],
        *,
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[dict]:
        params: Dict[str, Any] = {"select": "*"}
        for column, value in filters.items():
            params[column] = f"eq.{value}"
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit
        data = self._request("GET", self._table(table), params=params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise APIError(f"{self.BACKEND} {table} response not a list")
        return [row for row in data if isinstance(row, dict)]

    def _select_one(self, table: str, filters: Dict[str, Any]) -> Optional[dict]:
        rows = self._select(table, filters, limit=1)
        return rows[0] if rows else None

    # --------------------------------------------------
    # Galleries
    # --------------------------------------------------

    def get_folder_by_code(self, code: str) -> Optional[dict]:
        return self._select_one(FOLDERS_TABLE, {"code": code})

    def get_folder_media(self, folder_id: str) -> List[dict]:
        return self._select(FOLDER_MEDIA_TABLE, {"folder_id": folder_id}, order="order_index.asc")

    def get_legacy_memory_by_code(self, code: str) -> Optional[dict]:
        return self._select_one(LEGACY_TABLE, {"code": code})

    def get_legacy_media(self, memory_id: str) -> List[dict]:
        return self._select(LEGACY_MEDIA_TABLE, {"memory_id": memory_id}, order="order_index.asc")

    def update_view_count(self, table: str, record_id: str, view_count: int) -> None:
        self._request(
            "PATCH",
            self._table(table),
            params={"id": f"eq.{record_id}"},
            json_body={"view_count": int(view_count)},
            headers={"Prefer": "return=minimal"},
        )

    # --------------------------------------------------
    # Comments
    # --------------------------------------------------

    def get_comments(self, table: str, parent_key: str, parent_id: str) -> List[dict]:
        return self._select(table, {parent_key: parent_id}, order="created_at.desc")

    def add_comment(self, table: str, parent_key: str, parent_id: str, name: str, comment: str) -> dict:
        data = self._request(
            "POST",
            self._table(table),
            json_body=[{parent_key: parent_id, "name": name, "comment": comment}],
            headers={"Prefer": "return=representation"},
        )
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0]
        if isinstance(data, dict):
            return data
        raise APIError(f"{self.BACKEND} comment insert returned no row")
