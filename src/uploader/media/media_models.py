"""Media data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(slots=True)
class AttachmentRecord:
    id: int
    guid: str
    mime_type: str
    title: str
    content: str
    status: str
    file_path: str
    metadata: dict[str, Any] | None
    created_at: datetime

    @property
    def is_image(self) -> bool:
        return self.mime_type.split("/", 1)[0] == "image"
