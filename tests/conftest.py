from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from event_admin.config import Settings, get_settings
from event_admin.main import app
from event_admin.services.storage import StorageError, get_storage

MAIN_HTML = "<html><body>main page</body></html>"
ADMIN_HTML = "<html><body>admin page</body></html>"
PUBLIC_BASE = "https://files.example.test/public/event-images"


@dataclass
class FakeStorage:
    """Records every gateway call; individual operations can be made to fail."""

    fail_put: bool = False
    fail_insert: bool = False
    fail_delete_object: bool = False
    fail_delete_record: bool = False
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)
    objects: dict[tuple[str, str], bytes] = field(default_factory=dict)

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def put_object(self, bucket, key, data, content_type, upsert=False):
        self.calls.append(("put_object", (bucket, key, data, content_type, upsert)))
        if self.fail_put:
            raise StorageError("put_object failed", "The resource already exists")
        if not upsert and (bucket, key) in self.objects:
            raise StorageError("put_object failed", "The resource already exists")
        self.objects[(bucket, key)] = data
        return self.public_url(bucket, key)

    def public_url(self, bucket, key):
        return f"{PUBLIC_BASE}/{key}"

    async def delete_object(self, bucket, keys):
        self.calls.append(("delete_object", (bucket, list(keys))))
        if self.fail_delete_object:
            raise StorageError("delete_object failed", "Bucket not found")
        for key in keys:
            self.objects.pop((bucket, key), None)

    async def insert_record(self, table, row):
        self.calls.append(("insert_record", (table, dict(row))))
        if self.fail_insert:
            raise StorageError("insert_record failed", "relation does not exist")

    async def delete_record(self, table, record_id):
        self.calls.append(("delete_record", (table, record_id)))
        if self.fail_delete_record:
            raise StorageError("delete_record failed", "permission denied")


@pytest.fixture
def pages_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "public"
    directory.mkdir()
    (directory / "mainpage.html").write_text(MAIN_HTML, encoding="utf-8")
    (directory / "admin.html").write_text(ADMIN_HTML, encoding="utf-8")
    (directory / "styles.css").write_text("body { color: black; }", encoding="utf-8")
    return directory


@pytest.fixture
def test_settings(pages_dir: Path) -> Settings:
    return Settings(
        _env_file=None,
        username="admin",
        password="secret1",
        supabase_url="https://files.example.test",
        supabase_service_role_key="service-key",
        pages_dir=str(pages_dir),
    )


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def client(test_settings: Settings, storage: FakeStorage):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
