"""
Error kinds raised by the sail-plan advice pipeline.

Every error carries a ``kind`` (config, validation, not-found, upstream) and an
optional ``target`` naming the stage or call that failed, so callers can react
to the category without parsing messages.
"""

from __future__ import annotations

from typing import Optional


class SailPlanError(RuntimeError):
    """Base class for all errors surfaced by the planning pipeline."""

    kind: str = "error"

    def __init__(self, message: str, *, target: Optional[str] = None) -> None:
        super().__init__(message)
        self.target = target

    @property
    def message(self) -> str:
        return str(self)


class ConfigError(SailPlanError):
    """Raised when credentials are missing or a configuration file is invalid."""

    kind = "config"


class ValidationError(SailPlanError):
    """Raised when the plan request is incomplete (e.g. empty location)."""

    kind = "validation"


class NotFoundError(SailPlanError):
    """Raised when a lookup succeeds but yields nothing usable."""

    kind = "not-found"

    _MESSAGES = {
        "location": "Location not found",
        "forecast-for-date": "No forecast data for tomorrow",
    }

    def __init__(self, target: str, message: Optional[str] = None) -> None:
        super().__init__(message or self._MESSAGES.get(target, f"Nothing found for {target}"), target=target)


class UpstreamError(SailPlanError):
    """Raised when an external service call fails (transport or non-success status)."""

    kind = "upstream"

    _MESSAGES = {
        "geocode": "Failed to geocode location",
        "forecast": "Failed to fetch weather",
        "completion": "Failed to get advice from the language model",
    }

    def __init__(self, target: str, detail: Optional[str] = None) -> None:
        base = self._MESSAGES.get(target, f"Call to {target} failed")
        message = f"{base}: {detail}" if detail else base
        super().__init__(message, target=target)
        self.detail = detail
