from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CommentDTO:
    id: str
    name: str
    comment: str
    created_at: Optional[str]
