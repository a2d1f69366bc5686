from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, Response
from loguru import logger

from event_admin.config import Settings, get_settings
from event_admin.services.pages import FALLBACK_PAGE, LOGIN_PAGE, MAIN_PAGE, read_page, resolve_static_file

router = APIRouter(tags=["pages"])
fallback_router = APIRouter(tags=["pages"])


async def _page_response(app_settings: Settings, page_name: str, failure_text: str, failure_status: int = 500) -> Response:
    try:
        content = await read_page(app_settings.pages_path, page_name)
    except OSError as exc:
        logger.error("Page unavailable page={} error={}", page_name, str(exc))
        return PlainTextResponse(failure_text, status_code=failure_status)
    return HTMLResponse(content)


@router.get("/", response_class=HTMLResponse)
@router.get("/mainpage", response_class=HTMLResponse)
async def main_page(app_settings: Settings = Depends(get_settings)) -> Response:
    return await _page_response(app_settings, MAIN_PAGE, "Could not load main page")


@router.get("/login", response_class=HTMLResponse)
async def login_page(app_settings: Settings = Depends(get_settings)) -> Response:
    return await _page_response(app_settings, LOGIN_PAGE, "Could not load login page")


# Must be included after every other router: it matches any GET path.
@fallback_router.get("/{full_path:path}", response_class=HTMLResponse, include_in_schema=False)
async def fallback_page(full_path: str, app_settings: Settings = Depends(get_settings)) -> Response:
    static_file = resolve_static_file(app_settings.pages_path, full_path)
    if static_file is not None:
        return FileResponse(static_file)
    return await _page_response(app_settings, FALLBACK_PAGE, "Page not found", failure_status=404)
