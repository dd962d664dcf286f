"""
Wrapper around the OpenAI-compatible chat-completion API used for sail advice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import openai
from openai import OpenAI

from ..errors import UpstreamError
from .costs import price_for
from .prompts import SYSTEM_PROMPT
from .settings import LLMSettings

logger = logging.getLogger(__name__)

NO_ADVICE_TEXT = "No advice received"


@dataclass(frozen=True)
class AdvisoryResult:
    """
    The model's reply.

    Attributes:
        text: Advice text, or the "No advice received" placeholder.
        model: Model that produced the reply.
        cost_cents: Estimated cost of the call in USD cents (0 when unknown).
    """
    text: str
    model: Optional[str] = None
    cost_cents: float = 0.0


def generate_advice(prompt: str, settings: LLMSettings) -> AdvisoryResult:
    """
    Send one chat-completion request and return the first choice's text.

    An empty or missing reply degrades to the "No advice received" placeholder
    instead of failing.

    Args:
        prompt: The composed user prompt.
        settings: Model, endpoint and credential to use.

    Returns:
        An AdvisoryResult with the advice text.

    Raises:
        UpstreamError: On connection failure, timeout or non-success response.
    """
    # A single attempt per call; the SDK would otherwise retry twice.
    client = OpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.timeout,
        max_retries=0,
    )
    request_kwargs: dict[str, Any] = {
        "model": settings.model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
    }
    if settings.temperature is not None:
        request_kwargs["temperature"] = settings.temperature
    if settings.max_tokens is not None:
        request_kwargs["max_tokens"] = settings.max_tokens

    logger.info("Requesting sail advice from model %s", settings.model)
    try:
        response = client.chat.completions.create(**request_kwargs)
    except openai.APIStatusError as exc:
        logger.warning("Chat completion rejected (HTTP %s) for model %s", exc.status_code, settings.model)
        raise UpstreamError("completion", f"HTTP {exc.status_code}") from exc
    except openai.APIError as exc:
        logger.warning("Chat completion failed for model %s: %s", settings.model, type(exc).__name__)
        raise UpstreamError("completion", type(exc).__name__) from exc

    cost_cents = _log_usage_and_cost(settings.model, getattr(response, "usage", None))
    choices = getattr(response, "choices", None) or []
    message = choices[0].message if choices else None
    text = _coerce_message_content(getattr(message, "content", None))
    if not text:
        logger.warning(
            "LLM response for model %s contained no content (finish_reason=%s).",
            settings.model,
            getattr(choices[0], "finish_reason", None) if choices else None,
        )
        text = NO_ADVICE_TEXT
    return AdvisoryResult(text=text, model=settings.model, cost_cents=cost_cents)


def _coerce_message_content(content: Any) -> str:
    """xAI returns a string; content-part lists are joined by their ``text`` fields."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if not isinstance(content, (list, tuple)):
        return str(content)
    texts = []
    for part in content:
        text = part.get("text") if isinstance(part, dict) else getattr(part, "text", None)
        if text:
            texts.append(str(text))
    return "\n".join(texts).strip()


def _log_usage_and_cost(model_name: str, usage: Any) -> float:
    """Log prompt/completion/cached tokens and return the estimated cost in USD cents."""
    if not usage:
        logger.info("LLM usage – model=%s tokens=n/a cost_usd_cents=n/a", model_name)
        return 0.0

    try:
        prompt_tokens, cached_prompt_tokens, completion_tokens, total_tokens = _normalize_chat_usage(usage)
    except (TypeError, ValueError) as exc:
        logger.debug("Unable to normalize LLM usage data (%s): %s", type(usage), exc)
        logger.info("LLM usage – model=%s tokens=n/a cost_usd_cents=n/a", model_name)
        return 0.0

    price = price_for(model_name)
    cost_display = "n/a"
    cost_cents = 0.0
    if price:
        cost_cents = price.usd(prompt_tokens, completion_tokens, cached_prompt_tokens) * 100
        cost_display = f"{cost_cents:.2f}"

    logger.info(
        "LLM usage – model=%s prompt_tokens=%s cached_prompt_tokens=%s completion_tokens=%s total_tokens=%s cost_usd_cents=%s",
        model_name,
        prompt_tokens,
        cached_prompt_tokens,
        completion_tokens,
        total_tokens,
        cost_display,
    )
    return cost_cents


def _normalize_chat_usage(usage: Any) -> Tuple[int, int, int, int]:
    """Return (prompt_tokens, cached_prompt_tokens, completion_tokens, total_tokens)."""

    def _get_attr(obj: Any, attr: str) -> Any:
        if hasattr(obj, attr):
            return getattr(obj, attr)
        if isinstance(obj, dict):
            return obj.get(attr)
        return None

    prompt_tokens = _get_attr(usage, "prompt_tokens")
    if prompt_tokens is None:
        raise ValueError("Unsupported usage payload structure")
    cached = _get_attr(_get_attr(usage, "prompt_tokens_details") or {}, "cached_tokens") or 0
    completion_tokens = _get_attr(usage, "completion_tokens") or 0
    total_tokens = _get_attr(usage, "total_tokens") or (int(prompt_tokens) + int(completion_tokens))
    return int(prompt_tokens), int(cached), int(completion_tokens), int(total_tokens)
