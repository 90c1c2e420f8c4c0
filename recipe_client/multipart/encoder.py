"""multipart/form-data body encoding.

Pure function, no I/O: the output depends only on the order and content of
the inputs plus a fresh boundary per call.

Boundary collisions: the boundary is uuid4-derived, so the chance of it
occurring inside photo bytes is negligible. It is not checked, which is an
accepted risk.
"""

import logging
import uuid
from typing import Mapping, Sequence

from recipe_client.errors import EncodingError, EncodingErrorKind
from recipe_client.multipart.schemas import Attachment, MultipartRequest

logger = logging.getLogger(__name__)

BOUNDARY_PREFIX = "----RecipeFormBoundary"
FILE_FIELD = "files"
CRLF = b"\r\n"

_FORBIDDEN_HEADER_CHARS = ('"', "\r", "\n")


def new_boundary() -> str:
    return f"{BOUNDARY_PREFIX}{uuid.uuid4().hex}"


def _check_header_value(label: str, value: str) -> str:
    if not isinstance(value, str) or not value:
        raise EncodingError(
            f"{label} must be a non-empty string, got {value!r}",
            kind=EncodingErrorKind.INVALID_HEADER,
        )
    if any(ch in value for ch in _FORBIDDEN_HEADER_CHARS):
        raise EncodingError(
            f"{label} contains a quote or line break: {value!r}",
            kind=EncodingErrorKind.INVALID_HEADER,
        )
    return value


def encode(
    fields: Mapping[str, str],
    attachments: Sequence[Attachment],
    file_field: str = FILE_FIELD,
) -> MultipartRequest:
    """Encode text fields and binary attachments into one multipart body.

    Fields come first in mapping order, then attachments in sequence order.

    Raises:
        EncodingError: An attachment's content is not bytes-like, a field
            value is not a string, or a name/filename/MIME type would break
            header framing.
    """
    boundary = new_boundary()
    delimiter = f"--{boundary}".encode("ascii")
    file_field = _check_header_value("file field name", file_field)
    parts: list[bytes] = []

    for name, value in fields.items():
        name = _check_header_value("field name", name)
        if not isinstance(value, str):
            raise EncodingError(f"Field {name!r} must be text, got {type(value).__name__}")
        parts.append(delimiter + CRLF)
        parts.append(f'Content-Disposition: form-data; name="{name}"'.encode("utf-8") + CRLF)
        parts.append(CRLF)
        parts.append(value.encode("utf-8") + CRLF)

    for attachment in attachments:
        filename = _check_header_value("filename", attachment.filename)
        mime_type = _check_header_value(f"MIME type of {filename}", attachment.mime_type)
        if not isinstance(attachment.data, (bytes, bytearray, memoryview)):
            raise EncodingError(
                f"Attachment {filename} cannot be serialized to bytes "
                f"(got {type(attachment.data).__name__})"
            )
        parts.append(delimiter + CRLF)
        parts.append(
            f'Content-Disposition: form-data; name="{file_field}"; filename="{filename}"'.encode("utf-8")
            + CRLF
        )
        parts.append(f"Content-Type: {mime_type}".encode("utf-8") + CRLF)
        parts.append(CRLF)
        parts.append(bytes(attachment.data) + CRLF)

    parts.append(delimiter + b"--" + CRLF)
    body = b"".join(parts)

    logger.debug(
        f"Encoded {len(fields)} field(s) and {len(attachments)} attachment(s) "
        f"into {len(body)} bytes"
    )
    return MultipartRequest(boundary=boundary, body=body, attachment_count=len(attachments))
