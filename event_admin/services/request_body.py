from typing import Any

from fastapi import Request
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException


class MalformedBody(ValueError):
    pass


async def read_body_fields(request: Request) -> dict[str, Any]:
    """Return the request body as a flat dict, from JSON or form encoding.

    An empty body yields an empty dict. Undecodable bodies raise MalformedBody.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        try:
            form = await request.form()
        except (MultiPartException, HTTPException, ValueError) as exc:
            raise MalformedBody("Malformed form body") from exc
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = await request.json()
    except ValueError as exc:
        raise MalformedBody("Malformed request body") from exc
    if not isinstance(payload, dict):
        raise MalformedBody("Request body must be an object")
    return payload
