from __future__ import annotations

import asyncio
import logging

import httpx
import openai
import pytest
import requests

from sailplan.config import AdvisorConfig
from sailplan.config.settings import Secrets
from sailplan.errors import ConfigError, NotFoundError, SailPlanError, UpstreamError, ValidationError
from sailplan.pipeline import PlanOutcome, PlanRequest, PlanState, PlanningPipeline
from sailplan.pipeline import executor

from conftest import TOMORROW, make_forecast

REQUEST = PlanRequest(
    city="Annapolis",
    region="MD",
    country="US",
    vessel_model="J/24",
    available_sails="main, jib, spinnaker",
)


def _run(pipeline: PlanningPipeline, request: PlanRequest = REQUEST) -> PlanOutcome:
    return asyncio.run(pipeline.run(request))


def test_scenario_a_succeeds_with_model_text(secrets, weather, llm, fixed_today) -> None:
    pipeline = PlanningPipeline(secrets=secrets)

    outcome = _run(pipeline)

    assert outcome.state is PlanState.SUCCEEDED
    assert outcome.advice == "Use the jib..."
    assert outcome.error is None
    assert pipeline.outcome is outcome
    assert weather.kinds() == ["geocode", "forecast"]
    assert weather.calls[1][1]["lat"] == 38.98
    assert weather.calls[1][1]["lon"] == -76.49

    prompt = llm.requests[0]["messages"][1]["content"]
    assert f"- Traveling to: Annapolis,MD,US tomorrow ({TOMORROW})" in prompt
    wind_lines = [line for line in prompt.splitlines() if " m/s, Direction " in line]
    assert wind_lines == [
        f"- {TOMORROW} 09:00:00: Speed 3.1 m/s, Direction 180°",
        f"- {TOMORROW} 12:00:00: Speed 4.5 m/s, Direction 190°",
        f"- {TOMORROW} 15:00:00: Speed 5.2 m/s, Direction 200°",
        f"- {TOMORROW} 18:00:00: Speed 2.8 m/s, Direction 210°",
    ]


def test_scenario_b_empty_content_still_succeeds(secrets, weather, llm, fixed_today) -> None:
    llm.content = None

    outcome = _run(PlanningPipeline(secrets=secrets))

    assert outcome.state is PlanState.SUCCEEDED
    assert outcome.advice == "No advice received"


def test_scenario_c_forecast_failure_skips_completion(secrets, weather, llm, fixed_today) -> None:
    weather.forecast_status = 500

    outcome = _run(PlanningPipeline(secrets=secrets))

    assert outcome.state is PlanState.FAILED
    assert isinstance(outcome.error, UpstreamError)
    assert outcome.error.target == "forecast"
    assert outcome.advice is None
    assert weather.kinds() == ["geocode", "forecast"]
    assert llm.requests == []


def test_unknown_location_stops_after_geocode(secrets, weather, llm, fixed_today) -> None:
    weather.geocode_payload = []

    outcome = _run(PlanningPipeline(secrets=secrets))

    assert isinstance(outcome.error, NotFoundError)
    assert outcome.error.target == "location"
    assert outcome.message == "Location not found"
    assert weather.kinds() == ["geocode"]
    assert llm.requests == []


def test_no_forecast_for_tomorrow_skips_completion(secrets, weather, llm, fixed_today) -> None:
    weather.forecast_payload = {"list": make_forecast("2025-07-03", [4.0, 5.0], [0, 10])}

    outcome = _run(PlanningPipeline(secrets=secrets))

    assert isinstance(outcome.error, NotFoundError)
    assert outcome.error.target == "forecast-for-date"
    assert llm.requests == []


@pytest.mark.parametrize(
    "keys",
    [
        {"openweathermap_api_key": None, "xai_api_key": "xai-key"},
        {"openweathermap_api_key": "owm-key", "xai_api_key": ""},
        {"openweathermap_api_key": "   ", "xai_api_key": None},
    ],
)
def test_missing_credentials_fail_without_network(keys, weather, llm, fixed_today) -> None:
    pipeline = PlanningPipeline(secrets=Secrets(**keys))

    first = _run(pipeline)
    second = _run(pipeline)

    for outcome in (first, second):
        assert outcome.state is PlanState.FAILED
        assert isinstance(outcome.error, ConfigError)
        assert "API keys are missing" in outcome.message
    assert weather.calls == []
    assert llm.client_kwargs == []


def test_blank_location_fails_validation_without_network(secrets, weather, llm) -> None:
    request = PlanRequest(city="  ", region="", country=" ", vessel_model="J/24", available_sails="main")

    outcome = _run(PlanningPipeline(secrets=secrets), request)

    assert isinstance(outcome.error, ValidationError)
    assert outcome.error.target == "location"
    assert weather.calls == []


def test_credentials_are_checked_before_location(weather, llm) -> None:
    request = PlanRequest(city="", region="", country="")

    outcome = _run(PlanningPipeline(secrets=Secrets()), request)

    assert isinstance(outcome.error, ConfigError)


def test_blank_vessel_details_fail_validation(secrets, weather, llm) -> None:
    request = REQUEST.model_copy(update={"available_sails": ""})

    outcome = _run(PlanningPipeline(secrets=secrets), request)

    assert isinstance(outcome.error, ValidationError)
    assert "available sails" in outcome.message
    assert weather.calls == []


def test_completion_failure_is_reported(secrets, weather, llm, fixed_today) -> None:
    request = httpx.Request("POST", "https://api.x.ai/v1/chat/completions")
    llm.error = openai.InternalServerError("boom", response=httpx.Response(500, request=request), body=None)

    outcome = _run(PlanningPipeline(secrets=secrets))

    assert isinstance(outcome.error, UpstreamError)
    assert outcome.error.target == "completion"
    assert outcome.advisory is None


def test_observer_sees_running_then_terminal_state(secrets, weather, llm, fixed_today) -> None:
    events: list[tuple[PlanState, bool]] = []
    pipeline = PlanningPipeline(
        secrets=secrets,
        on_change=lambda outcome: events.append((outcome.state, pipeline.running)),
    )
    assert pipeline.state is PlanState.IDLE

    _run(pipeline)
    weather.geocode_payload = []
    _run(pipeline)

    assert events == [
        (PlanState.RUNNING, True),
        (PlanState.SUCCEEDED, False),
        (PlanState.RUNNING, True),
        (PlanState.FAILED, False),
    ]
    assert not pipeline.running


def test_failing_observer_does_not_stall_the_run(secrets, weather, llm, fixed_today, caplog) -> None:
    def observer(outcome: PlanOutcome) -> None:
        if outcome.state is PlanState.RUNNING:
            raise RuntimeError("display closed")

    pipeline = PlanningPipeline(secrets=secrets, on_change=observer)
    caplog.set_level(logging.ERROR)

    outcome = _run(pipeline)

    assert outcome.state is PlanState.SUCCEEDED
    assert pipeline.state is PlanState.SUCCEEDED
    assert not pipeline.running
    assert "Plan observer failed on running" in caplog.text


def test_rerun_clears_previous_result(secrets, weather, llm, fixed_today) -> None:
    pipeline = PlanningPipeline(secrets=secrets)
    weather.forecast_status = 500
    assert _run(pipeline).state is PlanState.FAILED

    weather.forecast_status = 200
    outcome = _run(pipeline)

    assert outcome.state is PlanState.SUCCEEDED
    assert outcome.error is None


def test_target_date_is_computed_per_run(secrets, weather, llm, monkeypatch: pytest.MonkeyPatch) -> None:
    from datetime import date

    pipeline = PlanningPipeline(secrets=secrets)
    monkeypatch.setattr(executor, "local_today", lambda: date(2025, 7, 3))
    assert _run(pipeline).state is PlanState.SUCCEEDED

    monkeypatch.setattr(executor, "local_today", lambda: date(2025, 7, 4))
    outcome = _run(pipeline)

    assert outcome.state is PlanState.SUCCEEDED
    prompt = llm.requests[-1]["messages"][1]["content"]
    assert "tomorrow (2025-07-05)" in prompt
    assert "Speed 8 m/s, Direction 270°" in prompt


def test_config_timeout_and_model_are_used(secrets, weather, llm, fixed_today, monkeypatch) -> None:
    timeouts: list = []

    def recording_get(url, params=None, timeout=None, **kwargs):
        timeouts.append(timeout)
        return weather.get(url, params=params, timeout=timeout, **kwargs)

    monkeypatch.setattr(requests, "get", recording_get)
    config = AdvisorConfig(llm="grok-3-mini", request_timeout_seconds=30)

    outcome = _run(PlanningPipeline(config=config, secrets=secrets))

    assert outcome.advisory.model == "grok-3-mini"
    assert llm.requests[0]["model"] == "grok-3-mini"
    assert llm.client_kwargs[0]["timeout"] == 30
    assert timeouts == [30, 30]


def test_unexpected_errors_become_failed_outcome(secrets, weather, llm, fixed_today, monkeypatch, caplog) -> None:
    def broken_compose(*_args, **_kwargs):
        raise KeyError("boom")

    monkeypatch.setattr(executor, "compose_prompt", broken_compose)
    caplog.set_level(logging.ERROR)
    pipeline = PlanningPipeline(secrets=secrets)

    outcome = _run(pipeline)

    assert outcome.state is PlanState.FAILED
    assert isinstance(outcome.error, SailPlanError)
    assert not pipeline.running
    assert "unexpectedly" in caplog.text
    assert llm.requests == []


def test_run_sync_wraps_event_loop(secrets, weather, llm, fixed_today) -> None:
    outcome = PlanningPipeline(secrets=secrets).run_sync(REQUEST)

    assert outcome.advice == "Use the jib..."


def test_pipeline_logs_stage_progress(secrets, weather, llm, fixed_today, caplog) -> None:
    caplog.set_level(logging.INFO)

    _run(PlanningPipeline(secrets=secrets))

    assert "Geocode resolved 'Annapolis,MD,US'" in caplog.text
    assert f"Kept 4 forecast intervals for {TOMORROW}" in caplog.text
    assert "owm-key" not in caplog.text
    assert "xai-key" not in caplog.text
