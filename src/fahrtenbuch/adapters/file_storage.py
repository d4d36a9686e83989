"""File-backed key-value storage."""

import asyncio
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from fahrtenbuch.services.entries import KeyValueStorage


@dataclass
class FileKeyValueStorage(KeyValueStorage):
    """Stores each key in its own file under ``directory``.

    Writes go through a temporary file and ``os.replace`` so a single key
    write is atomic.
    """

    directory: Path

    def path_for(self, key: str) -> Path:
        """Return the file holding ``key``."""
        return self.directory / f"{quote(key, safe='')}.json"

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is missing."""
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        """Atomically replace the value for ``key``."""
        await asyncio.to_thread(self._set, key, value)

    def _get(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            with path.open("r", encoding="utf-8") as handle:
                return handle.read()
        except FileNotFoundError:
            return None

    def _set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, self.path_for(key))
        finally:
            Path(tmp_name).unlink(missing_ok=True)
