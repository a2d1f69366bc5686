from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from event_admin.config import Settings, get_settings
from event_admin.models.event import DeleteEventRequest, ErrorResult, MessageResult, UploadResult
from event_admin.services.events import remove_event_image, store_event_image
from event_admin.services.request_body import MalformedBody, read_body_fields
from event_admin.services.storage import StorageError, StorageGateway, get_storage

router = APIRouter(tags=["events"])

UPLOAD_FIELD = "eventImage"


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    return JSONResponse(ErrorResult(error=error, details=details).model_dump(exclude_none=True), status_code=status_code)


@router.post("/api/upload-event", response_model=UploadResult)
async def upload_event(request: Request, storage: StorageGateway = Depends(get_storage)):
    logger.info("Upload route hit content_type={}", request.headers.get("content-type"))
    try:
        form = await request.form()
    except (MultiPartException, HTTPException, ValueError) as exc:
        logger.error("Form parse error error={}", str(exc))
        return _error(500, "File parsing failed")

    # Only the first file under the field is used.
    files = [item for item in form.getlist(UPLOAD_FIELD) if isinstance(item, UploadFile)]
    if not files:
        logger.warning("Upload rejected: no {} file field", UPLOAD_FIELD)
        return _error(400, "No file uploaded")
    if len(files) > 1:
        logger.warning("Multiple files under {} count={}; using the first", UPLOAD_FIELD, len(files))

    try:
        record = await store_event_image(files[0], storage)
    except StorageError as exc:
        logger.error("Upload to storage failed filename={} details={}", files[0].filename, exc.details)
        return _error(500, "Upload to storage failed", exc.details)
    except Exception as exc:
        logger.exception("Upload processing error filename={} error={}", files[0].filename, str(exc))
        return _error(500, "Failed to process upload")
    finally:
        await form.close()

    return UploadResult(message="Upload successful", imageUrl=record.url)


@router.delete("/delete-event/{event_id}", response_model=MessageResult)
async def delete_event(
    event_id: str,
    request: Request,
    storage: StorageGateway = Depends(get_storage),
    app_settings: Settings = Depends(get_settings),
):
    try:
        body = DeleteEventRequest.model_validate(await read_body_fields(request))
    except (MalformedBody, ValidationError) as exc:
        logger.warning("Delete body rejected event_id={} error={}", event_id, str(exc))
        return _error(400, "Malformed request body")

    try:
        await remove_event_image(event_id, body.imageUrl, storage, purge_record=app_settings.purge_event_records)
    except StorageError as exc:
        logger.error("File deletion error event_id={} details={}", event_id, exc.details)
        return _error(500, "Failed to delete image file")
    except Exception as exc:
        logger.exception("Delete event error event_id={} error={}", event_id, str(exc))
        return _error(500, "Failed to delete event")

    return MessageResult(message="Event and image deleted successfully")
