import sys
import time
from contextlib import asynccontextmanager
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from loguru import logger

from event_admin.config import Settings, settings
from event_admin.routes.auth import router as auth_router
from event_admin.routes.events import router as events_router
from event_admin.routes.pages import fallback_router
from event_admin.routes.pages import router as pages_router
from event_admin.services.supabase_client import SupabaseStorage, build_http_client


def _configure_logging(app_settings: Settings) -> None:
    logger.configure(patcher=lambda record: record["extra"].setdefault("request_id", "-"))
    logger.remove()
    logger.add(
        sys.stderr,
        level=app_settings.log_level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | req={extra[request_id]} | {name}:{function}:{line} | {message}",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings = settings
    _configure_logging(app_settings)
    app.state.settings = app_settings
    http_client = build_http_client(app_settings)
    app.state.storage = SupabaseStorage(app_settings, http_client)
    logger.bind(request_id="-").info(
        "Event admin ready port={} pages_dir={} credentials={} supabase_url={} service_key={} purge_event_records={}",
        app_settings.port,
        str(app_settings.pages_path),
        "configured" if app_settings.username and app_settings.password else "missing",
        app_settings.supabase_url,
        "loaded" if app_settings.supabase_service_role_key else "missing",
        app_settings.purge_event_records,
    )
    yield
    await http_client.aclose()
    logger.bind(request_id="-").info("Event admin stopped; storage client closed")


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pages_router)
app.include_router(auth_router)
app.include_router(events_router)
app.include_router(fallback_router)


@app.middleware("http")
async def bind_request_id(request: Request, call_next) -> Response:
    request_id = request.headers.get("x-request-id") or uuid4().hex
    client_host = request.client.host if request.client else "-"
    started = time.perf_counter()
    with logger.contextualize(request_id=request_id):
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error {} {} client={}", request.method, request.url.path, client_host)
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000
        # Successful GETs (pages, assets) log at DEBUG.
        log = logger.debug if request.method == "GET" and response.status_code < 400 else logger.info
        log(
            "{} {} -> {} client={} elapsed_ms={:.1f}",
            request.method,
            request.url.path,
            response.status_code,
            client_host,
            elapsed_ms,
        )
    response.headers["X-Request-ID"] = request_id
    return response


if __name__ == "__main__":
    uvicorn.run("event_admin.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
