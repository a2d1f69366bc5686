import time
from urllib.parse import unquote, urlsplit

from loguru import logger
from starlette.datastructures import UploadFile

from event_admin.models.event import EventImageRecord
from event_admin.services.storage import (
    EVENT_IMAGES_BUCKET,
    EVENT_IMAGES_TABLE,
    StorageError,
    StorageGateway,
)

DEFAULT_EXTENSION = "jpg"


def build_object_key(filename: str | None, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    name = filename or ""
    ext = name.rsplit(".", 1)[1] if "." in name else ""
    return f"event-{now_ms}.{ext or DEFAULT_EXTENSION}"


def object_key_from_url(image_url: str) -> str:
    return unquote(urlsplit(image_url).path.rsplit("/", 1)[-1])


async def _record_best_effort(storage: StorageGateway, record: EventImageRecord) -> None:
    # The blob is already stored; a missing catalog row must not fail the upload.
    try:
        await storage.insert_record(EVENT_IMAGES_TABLE, record.model_dump())
    except StorageError as exc:
        logger.error(
            "Metadata insert failed; keeping uploaded object file_name={} url={} details={}",
            record.file_name,
            record.url,
            exc.details,
        )


async def store_event_image(upload: UploadFile, storage: StorageGateway) -> EventImageRecord:
    """Push one uploaded event image to the object store and catalog it.

    Raises StorageError when the object write fails, in which case no
    metadata row is written.
    """
    data = await upload.read()
    key = build_object_key(upload.filename)
    content_type = upload.content_type or "application/octet-stream"
    logger.info(
        "Storing event image filename={} key={} content_type={} size_bytes={}",
        upload.filename,
        key,
        content_type,
        len(data),
    )

    await storage.put_object(EVENT_IMAGES_BUCKET, key, data, content_type, upsert=False)
    url = storage.public_url(EVENT_IMAGES_BUCKET, key)
    logger.info("Public URL generated key={} url={}", key, url)

    record = EventImageRecord(file_name=key, url=url)
    await _record_best_effort(storage, record)
    return record


async def remove_event_image(
    event_id: str,
    image_url: str | None,
    storage: StorageGateway,
    purge_record: bool = False,
) -> None:
    if image_url:
        key = object_key_from_url(image_url)
        if key:
            logger.info("Deleting event image event_id={} key={}", event_id, key)
            await storage.delete_object(EVENT_IMAGES_BUCKET, [key])
        else:
            logger.warning("Image URL has no object key event_id={} image_url={}", event_id, image_url)
    else:
        logger.info("No image URL supplied; skipping object delete event_id={}", event_id)

    if not purge_record:
        return
    try:
        await storage.delete_record(EVENT_IMAGES_TABLE, event_id)
    except StorageError as exc:
        logger.error("Metadata delete failed event_id={} details={}", event_id, exc.details)
