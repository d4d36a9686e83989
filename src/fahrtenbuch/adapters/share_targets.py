"""Share surfaces for exported files."""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

import httpx

from fahrtenbuch.adapters.local_filesystem import to_path
from fahrtenbuch.domain.errors import ExportUnavailableError
from fahrtenbuch.services.csv_export import ShareTarget

_logger = logging.getLogger(__name__)


@dataclass
class HttpxShareTarget(ShareTarget):
    """Uploads exported files to a webhook using httpx."""

    url: str | None
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, url: str | None) -> "HttpxShareTarget":
        """Create a share target with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient())

    async def is_available(self) -> bool:
        """Sharing works only when a webhook url is configured."""
        return bool(self.url)

    async def share(self, path: str, mime_type: str) -> None:
        """Upload the file as multipart form data."""
        if not self.url:
            raise ExportUnavailableError("No share webhook configured")
        file_path = to_path(path)
        try:
            content = await asyncio.to_thread(file_path.read_bytes)
            response = await self.http_client.post(
                self.url,
                files={"file": (file_path.name, content, mime_type)},
                timeout=20,
            )
            response.raise_for_status()
        except (OSError, httpx.HTTPError) as exc:
            _logger.error("Share upload failed: path=%s error=%s", path, exc)
            raise ExportUnavailableError(f"Failed to share {file_path.name}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


@dataclass
class DirectoryShareTarget(ShareTarget):
    """Drops exported files into an outbox directory."""

    outbox_dir: Path | None

    async def is_available(self) -> bool:
        """Sharing works only when an outbox directory is configured."""
        return self.outbox_dir is not None

    async def share(self, path: str, mime_type: str) -> None:
        """Copy the file into the outbox."""
        if self.outbox_dir is None:
            raise ExportUnavailableError("No share outbox configured")
        try:
            await asyncio.to_thread(_copy_into, to_path(path), self.outbox_dir)
        except OSError as exc:
            _logger.error("Share copy failed: path=%s error=%s", path, exc)
            raise ExportUnavailableError(f"Failed to share {path}") from exc
        _logger.info("Shared %s (%s) to %s", path, mime_type, self.outbox_dir)


def _copy_into(source: Path, outbox_dir: Path) -> None:
    outbox_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, outbox_dir / source.name)
