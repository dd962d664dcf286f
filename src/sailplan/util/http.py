"""
Helpers for describing HTTP failures in logs and error messages.
"""

from __future__ import annotations

import requests


def format_request_exception(exc: requests.RequestException) -> str:
    """
    Summarise a requests failure without echoing the request URL.

    The query string of every weather call carries the API key, so the URL
    embedded in the default exception text must never reach logs.
    """
    response = getattr(exc, "response", None)
    if response is not None:
        reason = (getattr(response, "reason", None) or "").strip()
        return f"HTTP {response.status_code} {reason}".strip()
    return type(exc).__name__
