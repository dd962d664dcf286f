"""
Command line interface for the sail-plan advisor.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.status import Status
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import AdvisorConfig, ConfigError, get_secrets, load_config
from .llm import resolve_llm_settings
from .pipeline import PlanOutcome, PlanRequest, PlanningPipeline

console = Console()
app = typer.Typer(help="Get sail-plan advice for tomorrow's wind at your destination.")
logger = logging.getLogger(__name__)

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]

PROGRESS_MESSAGES = [
    "checking the local wind forecasts",
    "analyzing your vessel and available sails",
    "conferring with artificial intelligence",
    "finishing up",
]
PROGRESS_INTERVAL_SECONDS = 3.0


def _configure_logging(level_name: str) -> None:
    env_override = os.getenv("SAILPLAN_LOG_LEVEL")
    level_str = (env_override or level_name or "warning").upper()
    if level_str not in {lvl.upper() for lvl in LOG_LEVELS}:
        level_str = "WARNING"
    logging.basicConfig(
        level=getattr(logging, level_str, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.debug("Logging configured at %s", level_str)


def _resolve_config_path(value: Optional[Path]) -> Optional[Path]:
    """Ensure config path exists and return absolute path."""
    if value is None:
        return None
    resolved = value.expanduser().resolve()
    if not resolved.exists():
        raise typer.BadParameter(f"No config file found at {resolved}")
    if not resolved.is_file():
        raise typer.BadParameter(f"Config path must be a file, got directory: {resolved}")
    return resolved


def _load_config_or_exit(path: Optional[Path]) -> AdvisorConfig:
    try:
        return load_config(path)
    except ConfigError as exc:
        console.print(f"[bold red]Configuration error:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


async def _cycle_progress(status: Status) -> None:
    index = 0
    while True:
        await asyncio.sleep(PROGRESS_INTERVAL_SECONDS)
        index = (index + 1) % len(PROGRESS_MESSAGES)
        status.update(f"[green]{PROGRESS_MESSAGES[index]}...[/]")


async def _run_with_progress(pipeline: PlanningPipeline, request: PlanRequest) -> PlanOutcome:
    with console.status(f"[green]{PROGRESS_MESSAGES[0]}...[/]", spinner="dots") as status:
        ticker = asyncio.create_task(_cycle_progress(status))
        try:
            return await pipeline.run(request)
        finally:
            ticker.cancel()


@app.callback(invoke_without_command=True)
def _root_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show sailplan version and exit.",
        is_flag=True,
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        help="Logging level (critical, error, warning, info, debug).",
        show_default=True,
        case_sensitive=False,
    ),
) -> None:
    """
    Default command when no subcommand is selected.
    """
    _configure_logging(log_level)

    if version:
        console.print(f"[bold green]sailplan[/] {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(
            "[bold yellow]sailplan[/] is ready. Run [cyan]sailplan advise --city Annapolis --region MD "
            "--country US --boat-model J/24 --sails \"main, jib\"[/] to get advice.",
        )


@app.command()
def advise(
    city: str = typer.Option(..., "--city", help="Destination city."),
    region: str = typer.Option(..., "--region", "--state", help="State, province or region."),
    country: str = typer.Option(..., "--country", help="Country name or code."),
    boat_model: Optional[str] = typer.Option(
        None,
        "--boat-model",
        "-b",
        help="Boat model (defaults to [vessel] model in the config file).",
    ),
    sails: Optional[str] = typer.Option(
        None,
        "--sails",
        "-s",
        help="Available sails, comma-separated or a description (defaults to [vessel] sails).",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to an optional TOML configuration file.",
        callback=_resolve_config_path,
    ),
) -> None:
    """
    Fetch tomorrow's wind for the destination and ask the model for a sail plan.
    """
    advisor_config = _load_config_or_exit(config)
    request = PlanRequest(
        city=city,
        region=region,
        country=country,
        vessel_model=boat_model if boat_model is not None else (advisor_config.vessel.model or ""),
        available_sails=sails if sails is not None else (advisor_config.vessel.sails or ""),
    )
    secrets = get_secrets()
    pipeline = PlanningPipeline(config=advisor_config, secrets=secrets)
    logger.info("Starting sail plan for '%s'", request.location)
    outcome = asyncio.run(_run_with_progress(pipeline, request))

    if outcome.error is not None:
        console.print(f"[bold red]{escape(outcome.message or '')}[/]")
        raise typer.Exit(code=1)

    settings = resolve_llm_settings(advisor_config, secrets)
    console.print(
        Panel(
            Text(outcome.advice or ""),
            title=f"Advice from {settings.display_name}",
            title_align="left",
        )
    )
    if outcome.advisory and outcome.advisory.cost_cents:
        logger.info("Estimated LLM cost: %.2f US cents", outcome.advisory.cost_cents)


@app.command()
def check(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to an optional TOML configuration file.",
        callback=_resolve_config_path,
    ),
) -> None:
    """
    Show which credentials are configured and which model will be used.
    """
    advisor_config = _load_config_or_exit(config)
    secrets = get_secrets()
    missing = set(secrets.missing())
    settings = resolve_llm_settings(advisor_config, secrets)

    table = Table(title="Sail Plan Configuration")
    table.add_column("Key")
    table.add_column("Value", overflow="fold")
    for name in ("OPENWEATHERMAP_API_KEY", "XAI_API_KEY"):
        table.add_row(name, "[red]missing[/]" if name in missing else "[green]set[/]")
    table.add_row("Model", settings.model)
    table.add_row("Endpoint", settings.base_url or "default")
    timeout = advisor_config.request_timeout_seconds
    table.add_row("Request timeout", f"{timeout:g}s" if timeout else "none")
    console.print(table)

    if missing:
        console.print("[bold red]API keys are missing.[/] Set them in your environment or a .env file.")
        raise typer.Exit(code=1)


def main() -> None:
    """
    Entry-point used by the console script defined in pyproject.toml.
    """
    app()
