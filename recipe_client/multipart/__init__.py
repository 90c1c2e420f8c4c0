"""Multipart request building: photo decoding and form-data encoding."""

from recipe_client.multipart.encoder import encode, new_boundary
from recipe_client.multipart.photos import decode_photo, load_photos
from recipe_client.multipart.schemas import (
    Attachment,
    MultipartRequest,
    PhotoLoadError,
    PhotoLoadResult,
)

__all__ = [
    "encode",
    "new_boundary",
    "decode_photo",
    "load_photos",
    "Attachment",
    "MultipartRequest",
    "PhotoLoadError",
    "PhotoLoadResult",
]
