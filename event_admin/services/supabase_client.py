from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from event_admin.config import Settings
from event_admin.services.storage import StorageError


def _provider_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for key in ("message", "error", "msg"):
            if payload.get(key):
                return str(payload[key])
    return f"HTTP {response.status_code}"


def build_http_client(app_settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=app_settings.storage_timeout_seconds,
        transport=transport,
    )


class SupabaseStorage:
    """Supabase Storage and PostgREST behind the storage gateway interface."""

    def __init__(self, app_settings: Settings, client: httpx.AsyncClient) -> None:
        self.base_url = (app_settings.supabase_url or "").rstrip("/")
        self.service_key = app_settings.supabase_service_role_key
        self.client = client

    def _headers(self, **extra: str) -> dict[str, str]:
        if not self.base_url or not self.service_key:
            logger.error(
                "Supabase configuration missing url_set={} key_set={}",
                bool(self.base_url),
                bool(self.service_key),
            )
            raise StorageError(
                "Storage unavailable",
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be configured",
            )
        headers = {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
        }
        headers.update(extra)
        return headers

    async def _send(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.exception("Supabase transport error operation={} url={} error={}", operation, url, str(exc))
            raise StorageError(f"{operation} failed", str(exc)) from exc
        if response.is_error:
            detail = _provider_message(response)
            logger.error(
                "Supabase call rejected operation={} status={} detail={}",
                operation,
                response.status_code,
                detail,
            )
            raise StorageError(f"{operation} failed", detail)
        return response

    def _object_url(self, bucket: str, key: str | None = None) -> str:
        url = f"{self.base_url}/storage/v1/object/{quote(bucket)}"
        if key is not None:
            url += f"/{quote(key)}"
        return url

    async def put_object(
        self, bucket: str, key: str, data: bytes, content_type: str, upsert: bool = False
    ) -> str:
        headers = self._headers(**{"Content-Type": content_type, "x-upsert": "true" if upsert else "false"})
        await self._send("put_object", "POST", self._object_url(bucket, key), content=data, headers=headers)
        logger.debug("Object stored bucket={} key={} size_bytes={}", bucket, key, len(data))
        return self.public_url(bucket, key)

    def public_url(self, bucket: str, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{quote(bucket)}/{quote(key)}"

    async def delete_object(self, bucket: str, keys: list[str]) -> None:
        await self._send(
            "delete_object",
            "DELETE",
            self._object_url(bucket),
            json={"prefixes": keys},
            headers=self._headers(),
        )
        logger.debug("Objects deleted bucket={} keys={}", bucket, keys)

    async def insert_record(self, table: str, row: dict[str, Any]) -> None:
        await self._send(
            "insert_record",
            "POST",
            f"{self.base_url}/rest/v1/{quote(table)}",
            json=[row],
            headers=self._headers(Prefer="return=minimal"),
        )
        logger.debug("Record inserted table={} row={}", table, row)

    async def delete_record(self, table: str, record_id: str) -> None:
        await self._send(
            "delete_record",
            "DELETE",
            f"{self.base_url}/rest/v1/{quote(table)}",
            params={"id": f"eq.{record_id}"},
            headers=self._headers(Prefer="return=minimal"),
        )
        logger.debug("Record deleted table={} id={}", table, record_id)
