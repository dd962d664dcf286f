"""
Narrow OpenWeatherMap forecast intervals to a single day and reduce them to wind readings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from ..api.forecast import ForecastRecord
from ..errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindReading:
    """
    One line of the wind summary handed to the prompt.

    Attributes:
        time: Interval timestamp exactly as delivered upstream.
        speed: Wind speed in meters per second.
        direction: Wind direction in degrees.
    """
    time: str
    speed: float
    direction: float


def records_for_date(records: Iterable[ForecastRecord], day: date) -> List[ForecastRecord]:
    """
    Keep the forecast intervals whose timestamp falls on ``day``.

    The leading ``YYYY-MM-DD`` of each timestamp is compared with ``day``, so
    any time or zone suffix is ignored. Intervals that do not start with a
    date are skipped. Upstream order is preserved.

    Raises:
        NotFoundError: If no interval falls on ``day``.
    """
    kept: List[ForecastRecord] = []
    for record in records:
        parsed = _timestamp_date(record.timestamp)
        if parsed is None:
            logger.debug("Skipping forecast interval with unparseable timestamp %r", record.timestamp)
            continue
        if parsed == day:
            kept.append(record)

    if not kept:
        logger.info("No forecast intervals fall on %s", day.isoformat())
        raise NotFoundError("forecast-for-date")
    logger.info("Kept %d forecast intervals for %s", len(kept), day.isoformat())
    return kept


def build_wind_summary(records: Iterable[ForecastRecord]) -> List[WindReading]:
    """Reduce forecast intervals to time/speed/direction readings."""
    return [
        WindReading(time=record.timestamp, speed=record.wind_speed, direction=record.wind_direction)
        for record in records
    ]


def _timestamp_date(value: str) -> Optional[date]:
    # "2025-07-04 12:00:00" from dt_txt; only the date prefix matters.
    try:
        return date.fromisoformat(value.strip()[:10])
    except (AttributeError, ValueError):
        return None
