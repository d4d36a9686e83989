"""Durable sidecar storage for odometer photos."""

import logging
from dataclasses import dataclass
from typing import Protocol

from fahrtenbuch.domain.errors import PhotoRelocationError

_logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    """Interface for the file operations the logbook needs."""

    async def exists(self, uri: str) -> bool:
        """Return whether a file or directory exists at the uri."""

    async def make_directory(self, uri: str) -> None:
        """Create a directory, including missing parents."""

    async def copy(self, source_uri: str, target_uri: str) -> None:
        """Copy a file."""

    async def delete(self, uri: str) -> None:
        """Delete a file; a missing file is not an error."""

    async def read_text(self, uri: str) -> str:
        """Read a UTF-8 text file."""

    async def write_text(self, uri: str, content: str) -> None:
        """Write a UTF-8 text file."""


@dataclass
class PhotoSidecarManager:
    """Moves transient camera captures into per-entry durable files."""

    file_system: FileSystem
    photos_dir: str

    def photo_uri_for(self, entry_id: str) -> str:
        """Return the durable location for an entry's photo."""
        return f"{self.photos_dir.rstrip('/')}/{entry_id}.jpg"

    async def relocate(self, source_uri: str, entry_id: str) -> str:
        """Copy the photo at ``source_uri`` and return its durable uri."""
        target_uri = self.photo_uri_for(entry_id)
        try:
            if not await self.file_system.exists(source_uri):
                raise PhotoRelocationError(f"Photo not found: {source_uri}")
            if not await self.file_system.exists(self.photos_dir):
                await self.file_system.make_directory(self.photos_dir)
            await self.file_system.copy(source_uri, target_uri)
        except OSError as exc:
            _logger.error("Photo relocation failed: source=%s error=%s", source_uri, exc)
            raise PhotoRelocationError(f"Failed to copy photo {source_uri}") from exc
        _logger.info("Photo relocated: entry_id=%s uri=%s", entry_id, target_uri)
        return target_uri

    async def remove(self, durable_uri: str) -> None:
        """Delete a durable photo if present."""
        if not durable_uri:
            return
        await self.file_system.delete(durable_uri)
        _logger.info("Photo removed: uri=%s", durable_uri)
