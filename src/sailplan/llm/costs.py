"""
xAI token prices used to estimate what each advice request costs.

Prices are USD per 1M tokens. A ``llm_costs.toml`` in the working directory
replaces individual entries::

    [model.grok-4]
    input = 3.0
    cached_input = 0.75
    output = 15.0

``cached_input`` is optional and falls back to the ``input`` rate.
"""

from __future__ import annotations

import logging
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

PRICE_OVERRIDE_FILE = Path("llm_costs.toml")


class ModelPrice(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    input: float = Field(ge=0)
    output: float = Field(ge=0)
    cached_input: Optional[float] = Field(default=None, ge=0)

    @property
    def cached_rate(self) -> float:
        return self.input if self.cached_input is None else self.cached_input

    def usd(self, prompt_tokens: int, completion_tokens: int, cached_prompt_tokens: int = 0) -> float:
        """USD charge for one completion; cached prompt tokens are billed at the cached rate."""
        fresh = max(prompt_tokens - cached_prompt_tokens, 0)
        per_token = (
            fresh * self.input
            + min(cached_prompt_tokens, prompt_tokens) * self.cached_rate
            + completion_tokens * self.output
        )
        return per_token / 1_000_000


# https://docs.x.ai/docs/models
XAI_PRICES: Dict[str, ModelPrice] = {
    "grok-4": ModelPrice(input=3.00, cached_input=0.75, output=15.00),
    "grok-3": ModelPrice(input=3.00, cached_input=0.75, output=15.00),
    "grok-3-mini": ModelPrice(input=0.30, cached_input=0.075, output=0.50),
}


def price_for(model: str) -> Optional[ModelPrice]:
    """Return the price for ``model``, preferring ``llm_costs.toml`` over the built-in table."""
    overrides = _load_price_overrides()
    if model in overrides:
        return overrides[model]
    return XAI_PRICES.get(model)


@lru_cache(maxsize=1)
def _load_price_overrides() -> Dict[str, ModelPrice]:
    if not PRICE_OVERRIDE_FILE.is_file():
        return {}
    try:
        payload = tomllib.loads(PRICE_OVERRIDE_FILE.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring %s: %s", PRICE_OVERRIDE_FILE, exc)
        return {}

    tables = payload.get("model")
    if not isinstance(tables, dict):
        logger.warning("Ignoring %s: expected [model.<name>] tables", PRICE_OVERRIDE_FILE)
        return {}

    prices: Dict[str, ModelPrice] = {}
    for name, values in tables.items():
        try:
            prices[name] = ModelPrice.model_validate(values)
        except PydanticValidationError as exc:
            logger.warning("Skipping price for %s in %s: %s", name, PRICE_OVERRIDE_FILE, exc.errors()[0]["msg"])
    if prices:
        logger.debug("Loaded prices for %s from %s", ", ".join(sorted(prices)), PRICE_OVERRIDE_FILE)
    return prices
