from dataclasses import dataclass
from typing import Optional, Literal


MediaType = Literal["image", "video"]

MEDIA_TYPES = ("image", "video")


@dataclass(frozen=True, slots=True)
class MediaItem:
    id: str                     # unique within a gallery
    url: str                    # canonical remote URL
    type: MediaType

    file_name: Optional[str] = None
    file_size: Optional[int] = None
    order_index: int = 0
    created_at: Optional[str] = None

    @property
    def is_video(self) -> bool:
        return self.type == "video"

    @property
    def is_image(self) -> bool:
        return self.type == "image"
