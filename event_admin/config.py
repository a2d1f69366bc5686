from pathlib import Path

from fastapi import Request
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True)

    app_name: str = "Event Admin"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    username: str | None = None
    password: str | None = None
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    storage_timeout_seconds: float = Field(default=30.0, gt=0)
    purge_event_records: bool = False
    pages_dir: str = "public"

    @property
    def pages_path(self) -> Path:
        return Path(self.pages_dir)


settings = Settings()


def get_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", settings)
