import pytest

from event_admin.config import Settings
from event_admin.services.events import build_object_key, object_key_from_url
from event_admin.services.storage import EVENT_IMAGES_BUCKET
from event_admin.services.supabase_client import SupabaseStorage


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("poster.png", "event-1700000000000.png"),
        ("poster.PNG", "event-1700000000000.PNG"),
        ("archive.tar.gz", "event-1700000000000.gz"),
        ("poster", "event-1700000000000.jpg"),
        ("poster.", "event-1700000000000.jpg"),
        ("", "event-1700000000000.jpg"),
        (None, "event-1700000000000.jpg"),
    ],
)
def test_build_object_key(filename, expected) -> None:
    assert build_object_key(filename, now_ms=1700000000000) == expected


def test_build_object_key_uses_current_time() -> None:
    key = build_object_key("a.webp")
    millis = int(key.removeprefix("event-").removesuffix(".webp"))
    assert millis > 1_600_000_000_000


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://x.supabase.co/storage/v1/object/public/event-images/event-1700000000000.png", "event-1700000000000.png"),
        ("https://x.supabase.co/storage/v1/object/public/event-images/event-1.png?download=1", "event-1.png"),
        ("event-2.jpg", "event-2.jpg"),
        ("https://x.supabase.co/storage/", ""),
    ],
)
def test_object_key_from_url(url: str, expected: str) -> None:
    assert object_key_from_url(url) == expected


@pytest.mark.parametrize("filename", ["flyer.jpég", "flyer.p g", "flyer.a#b", "flyer.png"])
def test_public_url_maps_back_to_stored_key(filename: str) -> None:
    app_settings = Settings(_env_file=None, supabase_url="https://proj.supabase.co", supabase_service_role_key="k")
    storage = SupabaseStorage(app_settings, client=None)
    key = build_object_key(filename, now_ms=1700000000000)

    url = storage.public_url(EVENT_IMAGES_BUCKET, key)

    assert object_key_from_url(url) == key
