from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from memories_bed.core.api.base import APIError, BaseAPIClient
from memories_bed.core.api.supabase import (
    FOLDERS_TABLE,
    FOLDER_COMMENTS_TABLE,
    LEGACY_TABLE,
    LEGACY_COMMENTS_TABLE,
)
from memories_bed.core.dto import CommentDTO, GalleryDTO, MediaItem, MemoryFolderDTO, MEDIA_TYPES
from memories_bed.core.share import is_valid_code

logger = logging.getLogger(__name__)


class GalleryNotFoundError(APIError):
    """No folder or legacy memory uses the requested code."""

    def __init__(self, code: str):
        super().__init__(f"No gallery found for code {code}", status=404)
        self.code = code


class CommentsDisabledError(RuntimeError):
    """The gallery owner turned comments off."""


class FoldersManager:
    """
    Domain manager for shared galleries.

    Responsibilities:
    - Resolve a short code to a folder (or a legacy memory)
    - Normalize rows into DTOs
    - View counter and comments

    Explicit non-responsibilities:
    - UI signaling
    - Threading / async
    """

    def __init__(self, client: BaseAPIClient):
        self._client = client

    # ------------------------------------------------------------------
    # Galleries
    # ------------------------------------------------------------------

    def load_gallery(self, code: str) -> GalleryDTO:
        code = (code or "").strip().upper()
        if not is_valid_code(code):
            raise ValueError(f"Invalid gallery code: {code!r}")

        row = self._client.get_folder_by_code(code)
        if row is not None:
            folder = self._folder_from_row(row, legacy=False)
            media_rows = self._client.get_folder_media(folder.id)
        else:
            row = self._client.get_legacy_memory_by_code(code)
            if row is None:
                raise GalleryNotFoundError(code)
            folder = self._folder_from_row(row, legacy=True)
            media_rows = self._client.get_legacy_media(folder.id)

        media = self._media_from_rows(media_rows)
        logger.info(
            f"Loaded gallery {code}: {len(media)} items"
            f"{' (legacy)' if folder.legacy else ''}"
        )
        return GalleryDTO(folder=folder, media=media)

    def record_view(self, gallery: GalleryDTO) -> bool:
        """
        Increment the view counter by one.

        Read-modify-write against the last loaded value; concurrent viewers
        may lose increments. Never raises.
        """
        folder = gallery.folder
        table = LEGACY_TABLE if folder.legacy else FOLDERS_TABLE
        try:
            self._client.update_view_count(table, folder.id, folder.view_count + 1)
        except Exception as exc:
            logger.warning(f"View count update failed for {folder.code}: {exc}")
            return False
        return True

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def list_comments(self, gallery: GalleryDTO) -> List[CommentDTO]:
        table, parent_key = self._comments_target(gallery.folder)
        rows = self._client.get_comments(table, parent_key, gallery.folder.id)
        return [self._comment_from_row(r) for r in rows]

    def add_comment(self, gallery: GalleryDTO, name: str, text: str) -> CommentDTO:
        folder = gallery.folder
        if not folder.allow_comments:
            raise CommentsDisabledError("Comments are disabled for this gallery")

        name = (name or "").strip()
        text = (text or "").strip()
        if not name or not text:
            raise ValueError("Name and comment are required")

        table, parent_key = self._comments_target(folder)
        row = self._client.add_comment(table, parent_key, folder.id, name, text)
        return self._comment_from_row(row)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _comments_target(folder: MemoryFolderDTO):
        if folder.legacy:
            return LEGACY_COMMENTS_TABLE, "memory_id"
        return FOLDER_COMMENTS_TABLE, "folder_id"

    @staticmethod
    def _as_bool(value: Any, default: bool) -> bool:
        if value is None:
            return default
        return bool(value)

    @staticmethod
    def _as_int(value: Any, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _folder_from_row(self, row: Dict[str, Any], *, legacy: bool) -> MemoryFolderDTO:
        return MemoryFolderDTO(
            id=str(row.get("id")),
            code=str(row.get("code") or "").upper(),
            title=row.get("title") or "Untitled",
            description=row.get("description"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            allow_comments=self._as_bool(row.get("allow_comments"), True),
            allow_downloads=self._as_bool(row.get("allow_downloads"), True),
            thumbnail_url=row.get("thumbnail_url"),
            qr_code_url=row.get("qr_code_url"),
            view_count=self._as_int(row.get("view_count")),
            legacy=legacy,
        )

    def _media_from_rows(self, rows: List[Dict[str, Any]]) -> List[MediaItem]:
        items: List[MediaItem] = []
        for row in rows:
            media_type = row.get("media_type")
            url = row.get("media_url")
            if media_type not in MEDIA_TYPES:
                logger.warning(f"Dropping media {row.get('id')}: unknown media_type {media_type!r}")
                continue
            if not url:
                logger.warning(f"Dropping media {row.get('id')}: missing media_url")
                continue
            size: Optional[int] = None
            if row.get("file_size") is not None:
                size = self._as_int(row.get("file_size"))
            items.append(
                MediaItem(
                    id=str(row.get("id")),
                    url=url,
                    type=media_type,
                    file_name=row.get("file_name"),
                    file_size=size,
                    order_index=self._as_int(row.get("order_index")),
                    created_at=row.get("created_at"),
                )
            )
        # stable sort keeps backend order for equal indices
        items.sort(key=lambda m: m.order_index)
        return items

    @staticmethod
    def _comment_from_row(row: Dict[str, Any]) -> CommentDTO:
        return CommentDTO(
            id=str(row.get("id")),
            name=row.get("name") or "",
            comment=row.get("comment") or "",
            created_at=row.get("created_at"),
        )
