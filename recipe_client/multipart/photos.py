"""Photo decoding into JPEG attachments.

Selected photos arrive as raw bytes in whatever format the device stored.
Each one is decoded with Pillow in a worker thread, with a bounded number of
decodes in flight, and all decodes are joined before returning.

Results are placed by original position so the attachment order always
matches the selection order. Undecodable photos are reported back as
PhotoLoadError entries instead of being dropped silently.
"""

import asyncio
import io
import logging
from typing import Sequence, Union

from PIL import Image, UnidentifiedImageError

from recipe_client.config import DEFAULT_MAX_DECODE_CONCURRENCY
from recipe_client.multipart.schemas import Attachment, PhotoLoadError, PhotoLoadResult

logger = logging.getLogger(__name__)

JPEG_MIME_TYPE = "image/jpeg"


def photo_filename(index: int) -> str:
    return f"photo{index}.jpg"


def decode_photo(data: bytes, index: int) -> Attachment:
    """Decode one photo and return it as a JPEG attachment.

    JPEG input is passed through unchanged; other formats are converted
    to RGB and re-encoded.

    Raises:
        ValueError: The bytes are not a decodable image.
    """
    if not data:
        raise ValueError("empty photo data")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            if img.format == "JPEG":
                jpeg_bytes = bytes(data)
            else:
                out = io.BytesIO()
                img.convert("RGB").save(out, format="JPEG")
                jpeg_bytes = out.getvalue()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValueError(f"cannot decode photo: {e}") from e

    return Attachment(filename=photo_filename(index), mime_type=JPEG_MIME_TYPE, data=jpeg_bytes)


async def load_photos(
    sources: Sequence[Union[bytes, bytearray]],
    max_concurrency: int = DEFAULT_MAX_DECODE_CONCURRENCY,
) -> PhotoLoadResult:
    """Decode all photos in parallel, preserving input order."""
    if max_concurrency < 1:
        raise ValueError("max_concurrency must be >= 1")

    semaphore = asyncio.Semaphore(max_concurrency)

    async def _decode(index: int, data: bytes) -> Union[Attachment, PhotoLoadError]:
        async with semaphore:
            try:
                return await asyncio.to_thread(decode_photo, data, index)
            except ValueError as e:
                logger.warning(f"Skipping photo {index}: {e}")
                return PhotoLoadError(index=index, message=str(e))

    outcomes = await asyncio.gather(*(_decode(i, d) for i, d in enumerate(sources)))

    result = PhotoLoadResult()
    for outcome in outcomes:
        if isinstance(outcome, PhotoLoadError):
            result.errors.append(outcome)
        else:
            result.attachments.append(outcome)

    logger.info(
        f"Decoded {len(result.attachments)}/{len(sources)} photo(s)"
        + (f", {result.skipped} skipped" if result.skipped else "")
    )
    return result
