import logging
from typing import Any

from starlette.concurrency import run_in_threadpool

from picture_validation.adapter.storage import StorageBinding
from picture_validation.adapter.vision import detect_objects
from picture_validation.config import Settings, validate_settings
from picture_validation.errors import EmptyUploadError, UploadError, ValidationError
from picture_validation.multipart import enforce_policy, extract_first_segment
from picture_validation.observability import metrics_registry
from picture_validation.schemas import UploadOutcome

logger = logging.getLogger(__name__)


def validate_request(
    robot_name: str | None,
    filename: str | None,
    body: bytes | None,
    content_type: str | None,
    settings: Settings,
) -> None:
    if not robot_name:
        raise ValidationError("robotName is not defined")

    # names the stored blob, the client's own part filename is informational
    if not filename:
        raise ValidationError("filename is not defined")

    if not body:
        raise ValidationError("Request body is not defined")

    if not content_type:
        raise ValidationError("Content type is not sent in header 'content-type'")

    validate_settings(settings)


def storage_target_url(robot_name: str, filename: str, settings: Settings) -> str:
    return f"{settings.storage_account_url.rstrip('/')}/{robot_name}/{filename}"


async def upload_photo(
    robot_name: str,
    filename: str,
    body: bytes,
    content_type: str,
    settings: Settings,
    storage: StorageBinding,
) -> str:
    """Store the first multipart segment and return the URL it is known by.

    Type and size policy is enforced before anything reaches storage.
    """
    segment = await extract_first_segment(body, content_type)
    try:
        if segment is None:
            raise EmptyUploadError("File buffer is incorrect")

        logger.info(
            "original filename = %s, content type = %s, size = %d",
            segment.filename,
            segment.content_type,
            len(segment.data),
        )
        enforce_policy(segment)
    except UploadError:
        if settings.enable_metrics:
            metrics_registry.record_upload(stored=False)
        raise

    await run_in_threadpool(storage.write, robot_name, filename, segment.data)
    if settings.enable_metrics:
        metrics_registry.record_upload(stored=True)
    return storage_target_url(robot_name, filename, settings)


async def gather_vision_result(resource_url: str, settings: Settings) -> Any:
    return await detect_objects(
        resource_url,
        api_key=settings.cognitive_api_key,
        endpoint=settings.cognitive_api_url,
        timeout_s=settings.vision_timeout_s,
    )


async def process_upload(
    robot_name: str | None,
    filename: str | None,
    body: bytes | None,
    content_type: str | None,
    settings: Settings,
    storage: StorageBinding,
) -> UploadOutcome:
    logger.info("upload HTTP trigger processed a request")

    try:
        validate_request(robot_name, filename, body, content_type, settings)
        resource_url = await upload_photo(
            robot_name, filename, body, content_type, settings, storage
        )
        result = await gather_vision_result(resource_url, settings)
    except UploadError as exc:
        logger.error(exc.message)
        return UploadOutcome.failure(exc.message, exc.status_code)

    return UploadOutcome.success(result)
