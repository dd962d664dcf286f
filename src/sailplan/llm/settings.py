"""
Helpers to determine which chat-completion model and endpoint to use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from ..config import AdvisorConfig, Secrets

DEFAULT_LLM = "grok-4"


@dataclass
class LLMSettings:
    """
    Configuration for the chat-completion provider.

    Attributes:
        model: Model identifier (e.g., "grok-4").
        api_key: API key for authentication.
        base_url: OpenAI-compatible API base URL.
        temperature: Optional sampling temperature.
        max_tokens: Optional maximum output tokens.
        timeout: Optional request timeout in seconds.
    """
    model: str
    api_key: str
    base_url: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    timeout: Optional[float] = None

    @property
    def display_name(self) -> str:
        """Human label for the model family, e.g. "Grok" for "grok-4"."""
        family = self.model.split("/")[-1].split("-")[0]
        return family.capitalize() if family else self.model


def resolve_llm_settings(config: AdvisorConfig, secrets: Secrets) -> LLMSettings:
    """
    Combine the advisor config, environment and secrets into LLM settings.

    Prioritizes `config.llm`, then the `SAILPLAN_DEFAULT_LLM` env var, and
    finally defaults to grok-4 on the xAI endpoint. A missing key is not
    rejected here; the pipeline checks credentials before any call.
    """
    choice = (config.llm or os.environ.get("SAILPLAN_DEFAULT_LLM") or DEFAULT_LLM).strip()
    return LLMSettings(
        model=choice,
        api_key=(secrets.xai_api_key or "").strip(),
        base_url=config.llm_base_url,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.request_timeout_seconds,
    )
