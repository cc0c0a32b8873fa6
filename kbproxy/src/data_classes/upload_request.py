"""Upload request data classes for creating knowledge bases."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class FileBlob:
    """A single uploaded file held in memory.

    Attributes:
        filename: Original filename as sent by the client
        content_type: MIME type as sent by the client
        data: File contents
    """

    filename: str
    content_type: str
    data: bytes

    def __repr__(self) -> str:
        return (
            f"FileBlob(filename='{self.filename}', "
            f"content_type='{self.content_type}', size={len(self.data)})"
        )

    def to_multipart(self) -> Tuple[str, bytes, str]:
        """Return the ``(filename, data, content_type)`` triple used by requests."""
        return (self.filename, self.data, self.content_type)


@dataclass
class UploadRequest:
    """Request to create a knowledge base from uploaded files.

    Attributes:
        name: Display name, trimmed and non-empty
        description: Optional description
        files: Files in the order they were received
    """

    name: str
    description: Optional[str] = None
    files: List[FileBlob] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValueError("Knowledge base name must not be empty")
        if self.description is not None and not self.description.strip():
            self.description = None

    @property
    def total_bytes(self) -> int:
        """Combined size of all file payloads."""
        return sum(len(blob.data) for blob in self.files)
