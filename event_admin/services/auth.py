from loguru import logger

from event_admin.config import Settings
from event_admin.models.auth import Credentials, PasswordChangeRequest

MIN_PASSWORD_LENGTH = 6


def credentials_match(credentials: Credentials, app_settings: Settings) -> bool:
    # Plain equality against the configured pair; unset references never match.
    if app_settings.username is None or app_settings.password is None:
        logger.warning("Login reference credentials are not configured")
        return False
    return credentials.username == app_settings.username and credentials.password == app_settings.password


def password_change_error(change: PasswordChangeRequest, app_settings: Settings) -> str | None:
    """Return the first rule the request breaks, or None when it is acceptable.

    Nothing is persisted: the configured password stays in effect.
    """
    if app_settings.password is None or change.oldPassword != app_settings.password:
        return "Old password is incorrect"
    if change.newPassword != change.confirmPassword:
        return "Password confirmation does not match"
    if len(change.newPassword) < MIN_PASSWORD_LENGTH:
        return f"New password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None
