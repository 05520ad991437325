from dataclasses import dataclass, field
from typing import List, Optional

from .media import MediaItem


@dataclass(frozen=True)
class MemoryFolderDTO:
    id: str
    code: str
    title: str

    description: Optional[str]
    created_at: Optional[str]
    updated_at: Optional[str]

    allow_comments: bool
    allow_downloads: bool

    thumbnail_url: Optional[str]
    qr_code_url: Optional[str]
    view_count: int

    # True when the record came from the pre-folder `memories` table
    legacy: bool = False


@dataclass(frozen=True)
class GalleryDTO:
    folder: MemoryFolderDTO
    media: List[MediaItem] = field(default_factory=list)

    @property
    def legacy(self) -> bool:
        return self.folder.legacy
