"""
Geocoding API client.

Speaks the Google Geocoding API response format:
    {"status": "OK", "results": [{"formatted_address": "...",
      "geometry": {"location": {"lat": 35.66, "lng": 139.70}}}]}

The loosely-typed JSON is converted into a GeocodeResult here and nowhere
else; every failure surfaces as GeocodeError.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from app.config import get_settings
from app.errors import GeocodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocodeResult:
    lat: float
    lng: float
    display_name: str


class GeocodingClient:
    """
    Usage:
        client = GeocodingClient(api_key="your_key")
        place = await client.geocode("Shibuya, Tokyo")
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.api_key = api_key
        self.base_url = base_url or settings.geocoder_url
        self.timeout = timeout or settings.geocoder_timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def geocode(self, address: str) -> GeocodeResult:
        client = await self._get_client()

        params = {"address": address}
        if self.api_key:
            params["key"] = self.api_key

        try:
            response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Geocoding API error: {e.response.status_code}")
            raise GeocodeError("Geocoding service unavailable")
        except httpx.RequestError as e:
            logger.error(f"Geocoding request failed: {e}")
            raise GeocodeError("Geocoding service unavailable")
        except ValueError:
            logger.error("Geocoding API returned a non-JSON body")
            raise GeocodeError("Geocoding service unavailable")

        return parse_geocode_response(data, address)


def parse_geocode_response(data, address: str) -> GeocodeResult:
    """Turn a raw geocoding payload into a GeocodeResult or raise GeocodeError."""
    if not isinstance(data, dict):
        raise GeocodeError("Geocoding service returned an unexpected response")

    status = data.get("status", "OK")
    results = data.get("results") or []
    if not isinstance(results, list):
        logger.error(f"Geocoding results for '{address}' are not a list")
        raise GeocodeError("Geocoding service returned an unexpected response")

    if status == "ZERO_RESULTS" or (status == "OK" and not results):
        raise GeocodeError(f"No location found for '{address}'")
    if status != "OK":
        logger.error(f"Geocoding API status {status}: {data.get('error_message', '')}")
        raise GeocodeError("Geocoding service unavailable")

    first = results[0]
    if not isinstance(first, dict):
        raise GeocodeError("Geocoding service returned an unexpected response")
    try:
        location = first["geometry"]["location"]
        lat = float(location["lat"])
        lng = float(location["lng"])
    except (KeyError, TypeError, ValueError):
        logger.error(f"Malformed geocoding result for '{address}'")
        raise GeocodeError("Geocoding service returned an unexpected response")

    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        raise GeocodeError("Geocoding service returned an unexpected response")

    display_name = first.get("formatted_address") or address
    return GeocodeResult(lat=lat, lng=lng, display_name=str(display_name))


_global_geocoder: Optional[GeocodingClient] = None


def get_geocoder() -> GeocodingClient:
    global _global_geocoder
    if _global_geocoder is None:
        _global_geocoder = GeocodingClient(api_key=get_settings().geocoder_api_key)
    return _global_geocoder


async def shutdown_geocoder():
    """Close the global geocoder's HTTP client."""
    global _global_geocoder
    if _global_geocoder is not None:
        await _global_geocoder.close()
        _global_geocoder = None
