"""Models for logbook entries."""

import re
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

_MILEAGE_PATTERN = re.compile(r"^\d+([.,]\d+)?$")


class Location(BaseModel):
    """Resolved or manually entered trip location."""

    model_config = ConfigDict(frozen=True)

    latitude: float = 0.0
    longitude: float = 0.0
    address: str = ""

    @property
    def is_geocoded(self) -> bool:
        """Whether the coordinates differ from the (0, 0) sentinel."""
        return not (self.latitude == 0 and self.longitude == 0)


class Entry(BaseModel):
    """A persisted trip record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: str
    mileage: str
    location: Location
    photo_uri: str = Field(default="", alias="photoUri")
    purpose: str

    @field_validator("timestamp")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        return _require_isoformat(value)

    def to_payload(self) -> dict[str, object]:
        """Return the JSON-compatible payload with stored field names."""
        return self.model_dump(by_alias=True)


class EntryDraft(BaseModel):
    """Entry data supplied by a caller before an id is assigned."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(default_factory=lambda: utc_isoformat(datetime.now(tz=UTC)))
    mileage: str
    location: Location
    photo_uri: str = Field(default="", alias="photoUri")
    purpose: str

    @field_validator("mileage")
    @classmethod
    def _check_mileage(cls, value: str) -> str:
        cleaned = value.strip()
        if not _MILEAGE_PATTERN.match(cleaned):
            raise ValueError("mileage must be decimal text")
        return cleaned

    @field_validator("purpose")
    @classmethod
    def _check_purpose(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("purpose must not be empty")
        return cleaned

    @field_validator("location")
    @classmethod
    def _check_location(cls, value: Location) -> Location:
        if not value.address.strip():
            raise ValueError("location address must not be empty")
        return value

    @field_validator("timestamp")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        return _require_isoformat(value)

    def with_id(self, entry_id: str, photo_uri: str) -> Entry:
        """Build the persisted entry for this draft."""
        return Entry(
            id=entry_id,
            timestamp=self.timestamp,
            mileage=self.mileage,
            location=self.location,
            photo_uri=photo_uri,
            purpose=self.purpose,
        )


def _require_isoformat(value: str) -> str:
    datetime.fromisoformat(value)
    return value


def utc_isoformat(moment: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with milliseconds and a Z suffix."""
    rendered = moment.astimezone(UTC).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")
