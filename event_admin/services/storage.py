from typing import Any, Protocol

from fastapi import Request

EVENT_IMAGES_BUCKET = "event-images"
EVENT_IMAGES_TABLE = "event_images"


class StorageError(Exception):
    """An object-store or metadata-store call failed.

    ``details`` carries the provider's own message so it can be passed
    through to the caller.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.details = details or message


class StorageGateway(Protocol):
    """Object store plus metadata store, as used by the event handlers.

    Any pair of backends can stand behind it; the app ships a Supabase one
    in ``event_admin.services.supabase_client``.
    """

    async def put_object(
        self, bucket: str, key: str, data: bytes, content_type: str, upsert: bool = False
    ) -> str: ...

    def public_url(self, bucket: str, key: str) -> str: ...

    async def delete_object(self, bucket: str, keys: list[str]) -> None: ...

    async def insert_record(self, table: str, row: dict[str, Any]) -> None: ...

    async def delete_record(self, table: str, record_id: str) -> None: ...


def get_storage(request: Request) -> StorageGateway:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise StorageError("Storage gateway is not initialized")
    return storage
