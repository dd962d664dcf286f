"""
LLM utilities: prompt composition, provider settings, and the completion client.
"""

from .settings import LLMSettings, resolve_llm_settings
from .client import AdvisoryResult, NO_ADVICE_TEXT, generate_advice
from .prompts import SYSTEM_PROMPT, compose_prompt

__all__ = [
    "LLMSettings",
    "resolve_llm_settings",
    "AdvisoryResult",
    "NO_ADVICE_TEXT",
    "generate_advice",
    "SYSTEM_PROMPT",
    "compose_prompt",
]
