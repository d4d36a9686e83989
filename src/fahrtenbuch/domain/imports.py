"""Models for CSV import results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ImportResult:
    """Counts reported after replacing the collection from a CSV file."""

    imported: int
    skipped: int
