from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace
import textwrap

import pytest
import requests
from typer.testing import CliRunner

from sailplan.api import forecast as forecast_module
from sailplan.api import geocode as geocode_module
from sailplan.config.settings import Secrets
from sailplan.llm import client as client_module
from sailplan.pipeline import executor

TODAY = date(2025, 7, 3)
TOMORROW = "2025-07-04"


class FakeResponse:
    def __init__(self, payload, status_code: int = 200, reason: str | None = None) -> None:
        self._payload = payload
        self.status_code = status_code
        self.reason = reason or ("OK" if status_code < 400 else "Internal Server Error")

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: ...appid=secret", response=self)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def make_forecast(day: str, speeds, directions, hours=None) -> list[dict]:
    """Build OpenWeatherMap-style forecast entries for one day."""
    hours = hours or [f"{3 * idx:02d}:00:00" for idx in range(len(speeds))]
    return [
        {"dt": 0, "dt_txt": f"{day} {hour}", "wind": {"speed": speed, "deg": deg, "gust": speed + 1}}
        for hour, speed, deg in zip(hours, speeds, directions)
    ]


class FakeWeatherService:
    """Stands in for the OpenWeatherMap geocoding and forecast endpoints."""

    def __init__(self) -> None:
        self.geocode_payload: object = [{"name": "Annapolis", "lat": 38.98, "lon": -76.49, "country": "US"}]
        self.geocode_status = 200
        self.forecast_payload: object = {
            "cod": "200",
            "list": (
                make_forecast("2025-07-03", [6.0, 6.5], [90, 95], hours=["18:00:00", "21:00:00"])
                + make_forecast(TOMORROW, [3.1, 4.5, 5.2, 2.8], [180, 190, 200, 210], hours=["09:00:00", "12:00:00", "15:00:00", "18:00:00"])
                + make_forecast("2025-07-05", [8.0], [270])
            ),
        }
        self.forecast_status = 200
        self.calls: list[tuple[str, dict]] = []

    def get(self, url, params=None, timeout=None, **_kwargs):
        if url == geocode_module.GEOCODE_URL:
            self.calls.append(("geocode", dict(params or {})))
            return FakeResponse(self.geocode_payload, self.geocode_status)
        if url == forecast_module.FORECAST_URL:
            self.calls.append(("forecast", dict(params or {})))
            return FakeResponse(self.forecast_payload, self.forecast_status)
        raise AssertionError(f"Unexpected URL {url}")

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.calls]


class FakeLLM:
    """Stands in for the OpenAI client class used by the completion wrapper."""

    def __init__(self) -> None:
        self.content: object = "Use the jib..."
        self.error: Exception | None = None
        self.choices_present = True
        self.usage = SimpleNamespace(prompt_tokens=1000, completion_tokens=500, total_tokens=1500, prompt_tokens_details=None)
        self.client_kwargs: list[dict] = []
        self.requests: list[dict] = []

    def __call__(self, **kwargs):
        self.client_kwargs.append(kwargs)
        return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=self._create)))

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        choices = []
        if self.choices_present:
            message = SimpleNamespace(role="assistant", content=self.content)
            choices = [SimpleNamespace(index=0, message=message, finish_reason="stop")]
        return SimpleNamespace(choices=choices, usage=self.usage)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def secrets() -> Secrets:
    return Secrets(openweathermap_api_key="owm-key", xai_api_key="xai-key")


@pytest.fixture
def weather(monkeypatch: pytest.MonkeyPatch) -> FakeWeatherService:
    service = FakeWeatherService()
    monkeypatch.setattr(requests, "get", service.get)
    return service


@pytest.fixture
def llm(monkeypatch: pytest.MonkeyPatch) -> FakeLLM:
    fake = FakeLLM()
    monkeypatch.setattr(client_module, "OpenAI", fake)
    return fake


@pytest.fixture
def fixed_today(monkeypatch: pytest.MonkeyPatch) -> date:
    monkeypatch.setattr(executor, "local_today", lambda: TODAY)
    return TODAY


@pytest.fixture
def sample_config(tmp_path: Path) -> Path:
    """
    Write a small configuration file for tests and return its path.
    """
    config_text = textwrap.dedent(
        """
        llm = "grok-3-mini"
        llm_base_url = "https://example.test/v1"
        request_timeout_seconds = 45

        [vessel]
        model = "Catalina 30"
        sails = "main, 135 genoa"
        """
    ).strip()
    path = tmp_path / "sailplan.toml"
    path.write_text(config_text + "\n", encoding="utf-8")
    return path
