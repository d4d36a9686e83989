"""CSV export of the logbook."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from fahrtenbuch.domain.entries import Entry
from fahrtenbuch.domain.errors import ExportUnavailableError, PersistenceError
from fahrtenbuch.services.entries import EntryStore
from fahrtenbuch.services.photos import FileSystem

_logger = logging.getLogger(__name__)

CSV_HEADER = "Datum,Kilometerstand,Standort,Zweck"
CSV_MIME_TYPE = "text/csv"


class ShareTarget(Protocol):
    """Interface for handing an exported file to the platform."""

    async def is_available(self) -> bool:
        """Return whether files can be shared."""

    async def share(self, path: str, mime_type: str) -> None:
        """Share the file at ``path``."""


def format_local_date(timestamp: str, tz: ZoneInfo) -> str:
    """Render an ISO timestamp as a German date without zero padding."""
    moment = datetime.fromisoformat(timestamp)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    local = moment.astimezone(tz)
    return f"{local.day}.{local.month}.{local.year}"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _quoted(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _plain(value: str) -> str:
    if any(char in value for char in ',"\r\n'):
        return _quoted(value)
    return value


def render_csv(entries: list[Entry], tz: ZoneInfo) -> str:
    """Render entries as the export document, header first."""
    rows = [CSV_HEADER]
    for entry in entries:
        rows.append(
            ",".join(
                [
                    _plain(format_local_date(entry.timestamp, tz)),
                    _plain(entry.mileage),
                    _quoted(entry.location.address),
                    _quoted(entry.purpose),
                ]
            )
        )
    return "\n".join(rows)


@dataclass
class CsvExporter:
    """Writes the logbook to a dated CSV file and shares it."""

    store: EntryStore
    file_system: FileSystem
    share_target: ShareTarget
    backup_dir: str
    timezone: ZoneInfo
    clock: Callable[[], datetime] = _utc_now

    async def export(self) -> str:
        """Export all entries and return the written file path."""
        try:
            if not await self.file_system.exists(self.backup_dir):
                await self.file_system.make_directory(self.backup_dir)
        except OSError as exc:
            _logger.error("Backup directory unavailable: %s", exc)
            raise PersistenceError("Failed to create backup directory") from exc

        if not await self.share_target.is_available():
            _logger.warning("Export aborted: sharing is not available")
            raise ExportUnavailableError("Sharing is not available on this platform")

        entries = await self.store.list()
        content = render_csv(entries, self.timezone)
        file_path = f"{self.backup_dir.rstrip('/')}/{self.export_file_name()}"
        try:
            await self.file_system.write_text(file_path, content)
        except OSError as exc:
            _logger.error("Export write failed: path=%s error=%s", file_path, exc)
            raise PersistenceError(f"Failed to write {file_path}") from exc

        await self.share_target.share(file_path, CSV_MIME_TYPE)
        _logger.info("Export shared: path=%s entries=%s", file_path, len(entries))
        return file_path

    def export_file_name(self) -> str:
        """Return the dated export file name."""
        return f"fahrtenbuch_{self.clock().astimezone(UTC).date().isoformat()}.csv"
