"""OpenStreetMap Nominatim reverse geocoding client."""

from dataclasses import dataclass

import httpx

from fahrtenbuch.services.locations import ReverseGeocoder


@dataclass
class HttpxNominatimGeocoder(ReverseGeocoder):
    """HTTPX-backed Nominatim client."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxNominatimGeocoder":
        """Create a geocoder with a managed httpx session."""
        return cls(
            base_url=base_url, user_agent=user_agent, http_client=httpx.AsyncClient()
        )

    async def reverse(self, latitude: float, longitude: float) -> dict[str, str] | None:
        """Return address components for the coordinates."""
        response = await self.http_client.get(
            f"{self.base_url.rstrip('/')}/reverse",
            params={
                "lat": latitude,
                "lon": longitude,
                "format": "jsonv2",
                "addressdetails": 1,
            },
            headers={"User-Agent": self.user_agent},
            timeout=10,
        )
        response.raise_for_status()
        payload = response.json()
        address = payload.get("address") if isinstance(payload, dict) else None
        if not address:
            return None
        return {
            "street": address.get("road", ""),
            "streetNumber": address.get("house_number", ""),
            "postalCode": address.get("postcode", ""),
            "city": address.get("city")
            or address.get("town")
            or address.get("village", ""),
        }

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
