"""Entry store over a single key-value slot."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from fahrtenbuch.domain.entries import Entry, EntryDraft
from fahrtenbuch.domain.errors import EntryValidationError, PersistenceError
from fahrtenbuch.services.photos import PhotoSidecarManager

_logger = logging.getLogger(__name__)

_ENTRIES_ADAPTER = TypeAdapter(list[Entry])


class KeyValueStorage(Protocol):
    """Persistence interface for string values addressed by key."""

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never written."""

    async def set(self, key: str, value: str) -> None:
        """Store a value under the key."""


def _new_entry_id() -> str:
    return str(uuid4())


@dataclass
class EntryStore:
    """Append, list and delete entries stored as one JSON array.

    Every operation rewrites the whole collection. Writers are serialized by
    an asyncio lock so overlapping calls from one event loop cannot lose
    updates.
    """

    storage: KeyValueStorage
    photos: PhotoSidecarManager
    storage_key: str
    id_factory: Callable[[], str] = _new_entry_id
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def save(self, draft: EntryDraft) -> Entry:
        """Persist a new entry and return it with its id and durable photo."""
        async with self._lock:
            entries = await self._read()
            entry_id = self.id_factory()
            photo_uri = ""
            if draft.photo_uri:
                photo_uri = await self.photos.relocate(draft.photo_uri, entry_id)
            entry = draft.with_id(entry_id, photo_uri)
            try:
                await self._write([*entries, entry])
            except PersistenceError:
                await self._discard_photo(photo_uri)
                raise
        _logger.info("Entry saved: id=%s total=%s", entry.id, len(entries) + 1)
        return entry

    async def list(self) -> list[Entry]:
        """Return all stored entries in creation order."""
        return await self._read()

    async def delete(self, entry_id: str) -> None:
        """Delete an entry and its photo; unknown ids are ignored."""
        async with self._lock:
            entries = await self._read()
            target = next((entry for entry in entries if entry.id == entry_id), None)
            if target is None:
                _logger.info("Entry delete skipped, not found: id=%s", entry_id)
                return
            remaining = [entry for entry in entries if entry.id != entry_id]
            await self._write(remaining)
            await self._discard_photo(target.photo_uri)
        _logger.info("Entry deleted: id=%s total=%s", entry_id, len(remaining))

    async def replace_all(self, entries: list[Entry]) -> None:
        """Overwrite the stored collection.

        Photos of replaced entries that the new collection no longer
        references are removed after the write succeeds. An unreadable
        previous collection is replaced without photo cleanup.
        """
        async with self._lock:
            try:
                previous = await self._read()
            except PersistenceError:
                _logger.warning("Replacing unreadable entries: key=%s", self.storage_key)
                previous = []
            await self._write(entries)
            kept = {entry.photo_uri for entry in entries}
            for entry in previous:
                if entry.photo_uri not in kept:
                    await self._discard_photo(entry.photo_uri)
        _logger.info("Entries replaced: total=%s", len(entries))

    def new_id(self) -> str:
        """Return a fresh entry id."""
        return self.id_factory()

    async def _discard_photo(self, photo_uri: str) -> None:
        try:
            await self.photos.remove(photo_uri)
        except OSError as exc:
            _logger.warning("Stray photo left behind: uri=%s error=%s", photo_uri, exc)

    async def _read(self) -> list[Entry]:
        try:
            raw = await self.storage.get(self.storage_key)
        except OSError as exc:
            _logger.error("Storage read failed: key=%s error=%s", self.storage_key, exc)
            raise PersistenceError("Failed to read entries") from exc
        if raw is None:
            return []
        try:
            return _ENTRIES_ADAPTER.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            _logger.error("Stored entries are corrupt: key=%s", self.storage_key)
            raise PersistenceError("Stored entries could not be parsed") from exc

    async def _write(self, entries: list[Entry]) -> None:
        payload = json.dumps(
            [entry.to_payload() for entry in entries], ensure_ascii=False
        )
        try:
            await self.storage.set(self.storage_key, payload)
        except OSError as exc:
            _logger.error("Storage write failed: key=%s error=%s", self.storage_key, exc)
            raise PersistenceError("Failed to write entries") from exc


def parse_draft(payload: dict[str, object]) -> EntryDraft:
    """Validate caller data into a draft entry."""
    try:
        return EntryDraft.model_validate(payload)
    except ValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise EntryValidationError(messages) from exc
