"""
Settings/secret loading helpers.
"""

from __future__ import annotations

import os
from pathlib import Path
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field
from dotenv import load_dotenv


def _load_dotenv() -> None:
    cwd_env = Path.cwd() / ".env"
    if cwd_env.exists():
        load_dotenv(dotenv_path=cwd_env, override=True)


_load_dotenv()


class Secrets(BaseModel):
    """
    Container for API keys loaded from environment variables.

    Attributes:
        openweathermap_api_key: Key for OpenWeatherMap (geocoding and forecast).
        xai_api_key: Key for the xAI chat-completion endpoint.
    """
    openweathermap_api_key: Optional[str] = Field(default=None, alias="OPENWEATHERMAP_API_KEY")
    xai_api_key: Optional[str] = Field(default=None, alias="XAI_API_KEY")

    model_config = {
        "populate_by_name": True,
    }

    def missing(self) -> List[str]:
        """Return the environment names of secrets that are unset or blank."""
        missing = []
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if not value or not value.strip():
                missing.append(field.alias or name)
        return missing


@lru_cache(maxsize=1)
def get_secrets() -> Secrets:
    """
    Load secrets from environment/.env exactly once.

    Returns:
        A Secrets object populated from environment variables.
    """
    values = {field.alias: os.getenv(field.alias) for field in Secrets.model_fields.values()}
    return Secrets(**values)
