"""Application configuration."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: Path = Path.home() / ".fahrtenbuch"
    storage_key: str = "@fahrtenbuch_entries"
    photos_dirname: str = "photos"
    backup_dirname: str = "backups"
    timezone: str = "Europe/Berlin"
    share_webhook_url: str | None = None
    share_outbox_dir: Path | None = None
    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "fahrtenbuch/0.1"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="FAHRTENBUCH_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def storage_dir(self) -> Path:
        """Directory holding the key-value storage files."""
        return self.data_dir / "storage"

    @property
    def photos_dir(self) -> Path:
        """Directory holding durable entry photos."""
        return self.data_dir / self.photos_dirname

    @property
    def backup_dir(self) -> Path:
        """Directory receiving CSV exports."""
        return self.data_dir / self.backup_dirname

    @property
    def zone(self) -> ZoneInfo:
        """Timezone used for dates shown in and read from CSV files."""
        return ZoneInfo(self.timezone)
