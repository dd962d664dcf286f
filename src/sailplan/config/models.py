"""
Pydantic models for validating the optional advisor configuration file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

import pydantic
from pydantic import BaseModel, Field

from ..errors import ConfigError

DEFAULT_LLM_BASE_URL = "https://api.x.ai/v1"


class VesselConfig(BaseModel):
    """
    Default vessel details used when the caller does not supply them.

    Attributes:
        model: Boat model (e.g., "J/24").
        sails: Free-text description of the sails aboard.
    """
    model: Optional[str] = None
    sails: Optional[str] = None

    model_config = {"extra": "forbid"}


class AdvisorConfig(BaseModel):
    """
    Top-level configuration for the advisor.

    Attributes:
        llm: Chat-completion model identifier (e.g., "grok-4").
        llm_base_url: OpenAI-compatible endpoint hosting the model.
        temperature: Optional sampling temperature; omitted from requests when unset.
        max_tokens: Optional completion token cap; omitted from requests when unset.
        request_timeout_seconds: Client-side timeout for every external call. None waits indefinitely.
        vessel: Default vessel details.
    """
    llm: Optional[str] = None
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    request_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    vessel: VesselConfig = Field(default_factory=VesselConfig)

    model_config = {"extra": "forbid"}


def load_config(path: Path | str | None) -> AdvisorConfig:
    """
    Load and validate a TOML config file into an AdvisorConfig instance.

    Args:
        path: Path to the TOML configuration file, or None for defaults.

    Returns:
        A validated AdvisorConfig object.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    if path is None:
        return AdvisorConfig()

    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with config_path.open("rb") as handle:
            raw_data: Dict[str, Any] = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in configuration file: {exc}") from exc

    try:
        return AdvisorConfig.model_validate(raw_data)
    except pydantic.ValidationError as exc:
        raise ConfigError(str(exc)) from exc
