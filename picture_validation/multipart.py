import logging
from collections.abc import AsyncGenerator

from starlette.datastructures import Headers, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser

from picture_validation.errors import ContentPolicyError
from picture_validation.schemas import MultipartSegment

BYTE = 1
KBYTE = 1024 * BYTE
MBYTE = 1024 * KBYTE

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png")
MAX_FILE_SIZE = 6 * MBYTE

logger = logging.getLogger(__name__)


async def _single_chunk(body: bytes) -> AsyncGenerator[bytes, None]:
    yield body


async def extract_first_segment(body: bytes, content_type: str) -> MultipartSegment | None:
    """Parse a multipart body and return its first part.

    Returns None when the header carries no boundary, the body does not parse,
    or the body holds no parts at all.
    """
    parser = MultiPartParser(
        Headers({"content-type": content_type}),
        _single_chunk(body),
        max_part_size=MAX_FILE_SIZE,
    )
    try:
        form = await parser.parse()
    except (MultiPartException, ValueError) as exc:
        logger.warning("multipart parse failed: %s", exc)
        return None

    try:
        items = form.multi_items()
        if not items:
            return None

        _, value = items[0]
        if isinstance(value, UploadFile):
            await value.seek(0)
            return MultipartSegment(
                filename=value.filename,
                content_type=value.content_type,
                data=await value.read(),
            )
        return MultipartSegment(data=value.encode("utf-8"))
    finally:
        await form.close()


def enforce_policy(segment: MultipartSegment) -> None:
    if segment.content_type not in ALLOWED_CONTENT_TYPES:
        raise ContentPolicyError(
            f"Content type is not in allowed set: {', '.join(ALLOWED_CONTENT_TYPES)}"
        )
    if len(segment.data) > MAX_FILE_SIZE:
        raise ContentPolicyError(f"File size exceeds limit of {MAX_FILE_SIZE // MBYTE}MB")
