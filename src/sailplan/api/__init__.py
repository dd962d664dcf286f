"""
External API clients used by the advice pipeline.
"""

from .geocode import Coordinates, compose_location, geocode_location
from .forecast import ForecastRecord, fetch_forecast

__all__ = [
    "Coordinates",
    "compose_location",
    "geocode_location",
    "ForecastRecord",
    "fetch_forecast",
]
