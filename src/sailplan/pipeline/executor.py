"""
Pipeline executor ties together geocoding, forecast filtering, prompt composition and the LLM call.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..api import fetch_forecast, geocode_location
from ..config import AdvisorConfig, Secrets, get_secrets
from ..errors import ConfigError, SailPlanError, ValidationError
from ..llm import AdvisoryResult, compose_prompt, generate_advice, resolve_llm_settings
from ..util import local_today, target_date
from .dataset import build_wind_summary, records_for_date
from .models import PlanRequest

logger = logging.getLogger(__name__)


class PlanState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class PlanOutcome:
    """
    Observable result of the pipeline.

    Exactly one of ``advisory`` (SUCCEEDED) or ``error`` (FAILED) is set for a
    terminal state; neither is set while IDLE or RUNNING.
    """
    state: PlanState
    advisory: Optional[AdvisoryResult] = None
    error: Optional[SailPlanError] = None

    @classmethod
    def idle(cls) -> "PlanOutcome":
        return cls(PlanState.IDLE)

    @classmethod
    def running(cls) -> "PlanOutcome":
        return cls(PlanState.RUNNING)

    @classmethod
    def succeeded(cls, advisory: AdvisoryResult) -> "PlanOutcome":
        return cls(PlanState.SUCCEEDED, advisory=advisory)

    @classmethod
    def failed(cls, error: SailPlanError) -> "PlanOutcome":
        return cls(PlanState.FAILED, error=error)

    @property
    def advice(self) -> Optional[str]:
        return self.advisory.text if self.advisory else None

    @property
    def message(self) -> Optional[str]:
        """Human-readable error message for a failed run."""
        return str(self.error) if self.error else None


class PlanningPipeline:
    """
    Run the advice stages in order and expose the outcome to the caller.

    Stages: geocode the location, fetch the forecast, keep tomorrow's
    intervals, compose the prompt, ask the model. The first failing stage
    ends the run. Each external call runs in a worker thread so ``run``
    suspends without blocking the event loop. Callers must not start a new
    run while ``running`` is True.
    """

    def __init__(
        self,
        *,
        config: Optional[AdvisorConfig] = None,
        secrets: Optional[Secrets] = None,
        on_change: Optional[Callable[[PlanOutcome], None]] = None,
    ) -> None:
        self._config = config or AdvisorConfig()
        self._secrets = secrets
        self._on_change = on_change
        self._outcome = PlanOutcome.idle()

    @property
    def outcome(self) -> PlanOutcome:
        return self._outcome

    @property
    def state(self) -> PlanState:
        return self._outcome.state

    @property
    def running(self) -> bool:
        return self._outcome.state is PlanState.RUNNING

    async def run(self, request: PlanRequest) -> PlanOutcome:
        """
        Execute the pipeline for one request.

        Returns:
            The terminal outcome (SUCCEEDED or FAILED). Errors are reported
            through the outcome, never raised.
        """
        self._transition(PlanOutcome.running())
        try:
            advisory = await self._execute(request)
        except SailPlanError as exc:
            logger.warning("Sail plan failed (%s): %s", exc.kind, exc)
            return self._transition(PlanOutcome.failed(exc))
        except Exception as exc:
            logger.error("Sail plan failed unexpectedly: %s", exc, exc_info=True)
            return self._transition(PlanOutcome.failed(SailPlanError(str(exc) or "An error occurred")))
        logger.info("Sail plan complete for '%s'", request.location)
        return self._transition(PlanOutcome.succeeded(advisory))

    def run_sync(self, request: PlanRequest) -> PlanOutcome:
        """Blocking wrapper around :meth:`run` for callers without an event loop."""
        return asyncio.run(self.run(request))

    async def _execute(self, request: PlanRequest) -> AdvisoryResult:
        secrets = self._secrets or get_secrets()
        missing = secrets.missing()
        if missing:
            raise ConfigError(
                f"API keys are missing. Please set {' and '.join(missing)} in your environment or .env file."
            )

        location = request.location
        if not location:
            raise ValidationError("Please provide city, state, and country.", target="location")
        blank = request.blank_fields()
        if blank:
            raise ValidationError(f"Please provide the {', '.join(blank)}.", target="request")

        day = target_date(local_today())
        weather_key = secrets.openweathermap_api_key.strip()
        llm_settings = resolve_llm_settings(self._config, secrets)
        timeout = self._config.request_timeout_seconds
        logger.info("Planning sail for '%s' on %s", location, day.isoformat())

        coords = await asyncio.to_thread(geocode_location, location, weather_key, timeout=timeout)
        records = await asyncio.to_thread(fetch_forecast, coords, weather_key, timeout=timeout)
        wind_summary = build_wind_summary(records_for_date(records, day))
        prompt = compose_prompt(request, wind_summary, location, day.isoformat())
        logger.debug("Composed prompt with %d wind readings", len(wind_summary))
        return await asyncio.to_thread(generate_advice, prompt, llm_settings)

    def _transition(self, outcome: PlanOutcome) -> PlanOutcome:
        self._outcome = outcome
        if self._on_change is not None:
            try:
                self._on_change(outcome)
            except Exception:
                logger.exception("Plan observer failed on %s", outcome.state.value)
        return outcome
