"""Location resolution from coordinates or typed addresses."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from fahrtenbuch.domain.entries import Location
from fahrtenbuch.domain.errors import EntryValidationError, GeocodingError

_logger = logging.getLogger(__name__)

_ADDRESS_PARTS = ("street", "streetNumber", "postalCode", "city")


class ReverseGeocoder(Protocol):
    """Interface for turning coordinates into address components."""

    async def reverse(self, latitude: float, longitude: float) -> dict[str, str] | None:
        """Return address components, or None when nothing was found."""


def format_address(components: dict[str, str]) -> str:
    """Join street, number, postal code and city, skipping missing parts."""
    parts = [str(components[key]) for key in _ADDRESS_PARTS if components.get(key)]
    return ", ".join(parts)


@dataclass
class LocationService:
    """Builds locations for new entries."""

    geocoder: ReverseGeocoder

    async def resolve(self, latitude: float, longitude: float) -> Location:
        """Reverse-geocode coordinates into a location."""
        try:
            components = await self.geocoder.reverse(latitude, longitude)
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Reverse geocoding failed: %s", exc)
            raise GeocodingError("Reverse geocoding failed") from exc
        address = format_address(components or {})
        if not address:
            raise GeocodingError(f"No address found for {latitude}, {longitude}")
        return Location(latitude=latitude, longitude=longitude, address=address)

    def manual(self, address: str) -> Location:
        """Build a location from a typed address."""
        cleaned = address.strip()
        if not cleaned:
            raise EntryValidationError("Address must not be empty")
        return Location(latitude=0, longitude=0, address=cleaned)
