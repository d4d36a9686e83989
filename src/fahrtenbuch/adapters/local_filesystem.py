"""Local filesystem adapter."""

import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path

from fahrtenbuch.services.photos import FileSystem

_FILE_SCHEME = "file://"


def to_path(uri: str) -> Path:
    """Convert a plain path or ``file://`` uri into a Path."""
    if uri.startswith(_FILE_SCHEME):
        uri = uri[len(_FILE_SCHEME) :]
    return Path(uri)


@dataclass
class LocalFileSystem(FileSystem):
    """File operations on the local disk, run off the event loop."""

    encoding: str = "utf-8"

    async def exists(self, uri: str) -> bool:
        """Return whether the path exists."""
        return await asyncio.to_thread(to_path(uri).exists)

    async def make_directory(self, uri: str) -> None:
        """Create the directory and its parents."""
        await asyncio.to_thread(to_path(uri).mkdir, parents=True, exist_ok=True)

    async def copy(self, source_uri: str, target_uri: str) -> None:
        """Copy file contents and metadata."""
        await asyncio.to_thread(shutil.copy2, to_path(source_uri), to_path(target_uri))

    async def delete(self, uri: str) -> None:
        """Delete a file if present."""
        await asyncio.to_thread(to_path(uri).unlink, missing_ok=True)

    async def read_text(self, uri: str) -> str:
        """Read a text file."""
        return await asyncio.to_thread(self._read, to_path(uri))

    async def write_text(self, uri: str, content: str) -> None:
        """Write a text file, replacing any existing content."""
        await asyncio.to_thread(self._write, to_path(uri), content)

    def _read(self, path: Path) -> str:
        with path.open("r", encoding=self.encoding, newline="") as handle:
            return handle.read()

    def _write(self, path: Path, content: str) -> None:
        with path.open("w", encoding=self.encoding, newline="") as handle:
            handle.write(content)
