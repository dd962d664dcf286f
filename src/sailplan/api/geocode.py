"""
Free-text location to coordinate resolution via the OpenWeatherMap geocoding API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..errors import NotFoundError, UpstreamError
from ..util import format_request_exception

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://api.openweathermap.org/geo/1.0/direct"


@dataclass(frozen=True)
class Coordinates:
    """
    Resolved location.

    Attributes:
        latitude: Latitude coordinate.
        longitude: Longitude coordinate.
    """
    latitude: float
    longitude: float


def compose_location(city: str, region: str, country: str) -> str:
    """Join the location parts into the query string used for geocoding."""
    parts = [(part or "").strip() for part in (city, region, country)]
    return ",".join(part for part in parts if part).strip()


def geocode_location(location: str, api_key: str, *, timeout: Optional[float] = None) -> Coordinates:
    """
    Resolve a place description into coordinates.

    Issues a single lookup restricted to one match. Additional matches, if the
    service ever returns them, are ignored.

    Args:
        location: Composite place text (e.g., "Annapolis,MD,US").
        api_key: OpenWeatherMap API key.
        timeout: Optional request timeout in seconds.

    Returns:
        The coordinates of the first match.

    Raises:
        UpstreamError: On transport failure, non-success status or malformed payload.
        NotFoundError: If the service returns no matches.
    """
    params = {"q": location, "limit": 1, "appid": api_key}
    logger.debug("Geocoding '%s' via %s", location, GEOCODE_URL)
    try:
        resp = requests.get(GEOCODE_URL, params=params, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as exc:
        logger.warning("Geocoding failed for '%s': %s", location, format_request_exception(exc))
        raise UpstreamError("geocode", format_request_exception(exc)) from exc
    except ValueError as exc:
        logger.warning("Geocoding returned invalid JSON for '%s': %s", location, exc)
        raise UpstreamError("geocode", "invalid JSON response") from exc

    if not isinstance(payload, list):
        raise UpstreamError("geocode", "unexpected response shape")
    if not payload:
        logger.info("No geocoding results for '%s'", location)
        raise NotFoundError("location")

    entry = payload[0]
    try:
        result = Coordinates(latitude=float(entry["lat"]), longitude=float(entry["lon"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise UpstreamError("geocode", "match is missing lat/lon") from exc

    logger.info(
        "Geocode resolved '%s' (lat=%.4f, lon=%.4f)",
        location,
        result.latitude,
        result.longitude,
    )
    return result
