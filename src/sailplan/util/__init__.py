"""
Shared utility helpers for HTTP error reporting and calendar calculations.
"""

from .http import format_request_exception
from .time import local_today, target_date

__all__ = [
    "format_request_exception",
    "local_today",
    "target_date",
]
