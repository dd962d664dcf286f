"""
Client for the OpenWeatherMap 5 day / 3 hour forecast endpoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from ..errors import UpstreamError
from ..util import format_request_exception
from .geocode import Coordinates

logger = logging.getLogger(__name__)

FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"


@dataclass(frozen=True)
class ForecastRecord:
    """
    One forecast interval.

    Attributes:
        timestamp: Interval start as delivered upstream ("YYYY-MM-DD HH:MM:SS").
        wind_speed: Wind speed in meters per second.
        wind_direction: Wind direction in degrees (0-360).
    """
    timestamp: str
    wind_speed: float
    wind_direction: float


def fetch_forecast(coords: Coordinates, api_key: str, *, timeout: Optional[float] = None) -> List[ForecastRecord]:
    """
    Fetch the multi-day forecast for the supplied coordinates in metric units.

    Records are returned in upstream order, which is chronological.

    Args:
        coords: Target coordinates.
        api_key: OpenWeatherMap API key.
        timeout: Optional request timeout in seconds.

    Returns:
        The full ordered list of forecast intervals.

    Raises:
        UpstreamError: On transport failure, non-success status or malformed payload.
    """
    params = {
        "lat": coords.latitude,
        "lon": coords.longitude,
        "units": "metric",
        "appid": api_key,
    }
    logger.debug("Fetching forecast for lat=%.4f lon=%.4f", coords.latitude, coords.longitude)
    try:
        resp = requests.get(FORECAST_URL, params=params, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as exc:
        logger.warning("Forecast request failed: %s", format_request_exception(exc))
        raise UpstreamError("forecast", format_request_exception(exc)) from exc
    except ValueError as exc:
        logger.warning("Forecast returned invalid JSON: %s", exc)
        raise UpstreamError("forecast", "invalid JSON response") from exc

    records = _parse_records(payload)
    logger.info(
        "Fetched %d forecast intervals for lat=%.4f lon=%.4f",
        len(records),
        coords.latitude,
        coords.longitude,
    )
    return records


def _parse_records(payload: object) -> List[ForecastRecord]:
    """Convert the raw forecast payload into ForecastRecord entries."""
    if not isinstance(payload, dict) or not isinstance(payload.get("list"), list):
        raise UpstreamError("forecast", "response missing 'list'")

    records: List[ForecastRecord] = []
    for item in payload["list"]:
        try:
            wind = item["wind"]
            records.append(
                ForecastRecord(
                    timestamp=str(item["dt_txt"]),
                    wind_speed=float(wind["speed"]),
                    wind_direction=float(wind["deg"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamError("forecast", f"malformed interval: {exc!r}") from exc
    return records
