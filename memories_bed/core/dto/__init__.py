from memories_bed.core.dto.media import MediaItem, MediaType, MEDIA_TYPES
from memories_bed.core.dto.folder import MemoryFolderDTO, GalleryDTO
from memories_bed.core.dto.comment import CommentDTO

__all__ = [
    "MediaItem",
    "MediaType",
    "MEDIA_TYPES",
    "MemoryFolderDTO",
    "GalleryDTO",
    "CommentDTO",
]
