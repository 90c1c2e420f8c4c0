"""Request-scoped multipart data types.

Attachments and encoded requests live only for the duration of one HTTP
call; nothing here is cached or shared between workflows.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Attachment:
    """A named binary part (one photo)."""
    filename: str
    mime_type: str
    data: bytes = field(repr=False)


@dataclass(frozen=True)
class MultipartRequest:
    """An encoded multipart/form-data body and its boundary."""
    boundary: str
    body: bytes = field(repr=False)
    attachment_count: int = 0

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"


@dataclass(frozen=True)
class PhotoLoadError:
    """A photo that could not be decoded, keyed by its input position."""
    index: int
    message: str


@dataclass
class PhotoLoadResult:
    """Decoded attachments in input order, plus per-photo failures."""
    attachments: list[Attachment] = field(default_factory=list)
    errors: list[PhotoLoadError] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.errors)
