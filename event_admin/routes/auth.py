from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from event_admin.config import Settings, get_settings
from event_admin.models.auth import Credentials, LoginResult, PasswordChangeRequest
from event_admin.models.event import ErrorResult, MessageResult
from event_admin.services.auth import credentials_match, password_change_error
from event_admin.services.request_body import MalformedBody, read_body_fields

router = APIRouter(tags=["auth"])


def _login_rejected() -> JSONResponse:
    result = LoginResult(success=False, message="Invalid username or password")
    return JSONResponse(result.model_dump(), status_code=401)


@router.post("/login/verify", response_model=LoginResult)
async def verify_login(request: Request, app_settings: Settings = Depends(get_settings)):
    try:
        credentials = Credentials.model_validate(await read_body_fields(request))
    except (MalformedBody, ValidationError) as exc:
        logger.warning("Login body rejected error={}", str(exc))
        return _login_rejected()

    if not credentials_match(credentials, app_settings):
        logger.warning("Login rejected username={}", credentials.username)
        return _login_rejected()

    logger.info("Login accepted username={}", credentials.username)
    return LoginResult(success=True, message="Login successful")


@router.post("/change-password", response_model=MessageResult)
async def change_password(request: Request, app_settings: Settings = Depends(get_settings)):
    try:
        change = PasswordChangeRequest.model_validate(await read_body_fields(request))
    except (MalformedBody, ValidationError) as exc:
        logger.warning("Password change body rejected error={}", str(exc))
        return JSONResponse(ErrorResult(error="Malformed request body").model_dump(exclude_none=True), status_code=400)

    error = password_change_error(change, app_settings)
    if error:
        logger.warning("Password change rejected reason={}", error)
        return JSONResponse(ErrorResult(error=error).model_dump(exclude_none=True), status_code=400)

    # The configured password is left untouched.
    logger.info("Password change accepted; new password not persisted")
    return MessageResult(message="Password changed successfully")
