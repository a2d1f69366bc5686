from pathlib import Path

from loguru import logger
from starlette.concurrency import run_in_threadpool

MAIN_PAGE = "mainpage.html"
LOGIN_PAGE = "admin.html"
FALLBACK_PAGE = LOGIN_PAGE


async def read_page(pages_path: Path, page_name: str) -> str:
    path = pages_path / page_name
    logger.debug("Reading page page={} path={}", page_name, str(path))
    return await run_in_threadpool(path.read_text, encoding="utf-8")


def resolve_static_file(pages_path: Path, request_path: str) -> Path | None:
    """Map a request path onto a regular file inside ``pages_path``.

    Returns None for anything that is missing or would escape the directory.
    """
    relative = request_path.lstrip("/")
    if not relative:
        return None
    root = pages_path.resolve()
    candidate = (root / relative).resolve()
    if not candidate.is_relative_to(root):
        logger.warning("Static path escapes pages dir request_path={}", request_path)
        return None
    if not candidate.is_file():
        return None
    return candidate
