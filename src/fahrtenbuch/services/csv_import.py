"""CSV import that replaces the stored logbook."""

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from fahrtenbuch.domain.entries import Entry, Location, utc_isoformat
from fahrtenbuch.domain.errors import ImportParseError
from fahrtenbuch.domain.imports import ImportResult
from fahrtenbuch.services.entries import EntryStore
from fahrtenbuch.services.photos import FileSystem

_logger = logging.getLogger(__name__)

_GERMAN_DATE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")
_FIELD_COUNT = 4


def parse_export_date(value: str) -> date | None:
    """Parse ``d.m.yyyy`` or ISO ``yyyy-mm-dd``; return None when invalid."""
    cleaned = value.strip()
    try:
        match = _GERMAN_DATE.match(cleaned)
        if match:
            day, month, year = (int(part) for part in match.groups())
            return date(year, month, day)
        return date.fromisoformat(cleaned[:10])
    except ValueError:
        return None


@dataclass
class CsvImporter:
    """Parses exported CSV documents back into entries."""

    store: EntryStore
    file_system: FileSystem
    timezone: ZoneInfo

    async def import_file(self, path: str) -> ImportResult:
        """Replace the stored collection with the entries parsed from ``path``.

        Imported entries carry no photos, so the sidecar photos of the
        replaced entries are removed by the store.
        """
        try:
            content = await self.file_system.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            _logger.error("Import read failed: path=%s error=%s", path, exc)
            raise ImportParseError(f"Failed to read {path}") from exc

        try:
            entries, skipped = self.parse(content)
        except csv.Error as exc:
            _logger.error("Import parse failed: path=%s error=%s", path, exc)
            raise ImportParseError(f"Failed to parse {path}") from exc
        await self.store.replace_all(entries)
        _logger.info(
            "Import finished: path=%s imported=%s skipped=%s",
            path,
            len(entries),
            skipped,
        )
        return ImportResult(imported=len(entries), skipped=skipped)

    def parse(self, content: str) -> tuple[list[Entry], int]:
        """Parse a CSV document and return entries plus the skipped row count.

        The first record is the header. Blank lines are ignored; rows with
        fewer than four fields or an unreadable date are skipped.
        """
        reader = csv.reader(io.StringIO(content))
        entries: list[Entry] = []
        skipped = 0
        for line_number, row in enumerate(reader, start=1):
            if line_number == 1:
                continue
            if not any(field.strip() for field in row):
                continue
            if len(row) < _FIELD_COUNT:
                _logger.warning("Import row %s skipped: %s fields", line_number, len(row))
                skipped += 1
                continue
            date_text, mileage, address, purpose = (
                field.strip() for field in row[:_FIELD_COUNT]
            )
            parsed_date = parse_export_date(date_text)
            if parsed_date is None:
                _logger.warning("Import row %s skipped: bad date %r", line_number, date_text)
                skipped += 1
                continue
            entries.append(
                Entry(
                    id=self.store.new_id(),
                    timestamp=self._local_midnight(parsed_date),
                    mileage=mileage,
                    location=Location(latitude=0, longitude=0, address=address),
                    photo_uri="",
                    purpose=purpose,
                )
            )
        return entries, skipped

    def _local_midnight(self, day: date) -> str:
        midnight = datetime(day.year, day.month, day.day, tzinfo=self.timezone)
        return utc_isoformat(midnight)
