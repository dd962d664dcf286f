"""
System prompt and user prompt builder for sail-plan advice.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from ..pipeline.dataset import WindReading
    from ..pipeline.models import PlanRequest


SYSTEM_PROMPT = "You are a helpful sailing expert."

USER_PROMPT_TEMPLATE = """
Vessel information:
- Boat model: {boat_model}
- Available sails: {available_sails}

Trip details:
- Traveling to: {location} tomorrow ({target_date})

Predicted wind for tomorrow:
{wind_lines}

Provide advice on the sail plan for this trip, including sail choices, safety considerations, and any other relevant tips based on the wind conditions.
"""


def compose_prompt(
    request: "PlanRequest",
    wind_summary: Iterable["WindReading"],
    location: str,
    target_date: str,
) -> str:
    """
    Render the vessel details and the day's wind readings into the user prompt.

    User text is interpolated as-is. The output depends only on the arguments,
    so identical inputs always yield an identical prompt.

    Args:
        request: The plan request carrying the vessel details.
        wind_summary: Wind readings for the target day, in upstream order.
        location: Destination location text.
        target_date: Target day as YYYY-MM-DD.

    Returns:
        The prompt text sent as the sole user message.
    """
    wind_lines = "\n".join(format_wind_line(reading) for reading in wind_summary)
    return USER_PROMPT_TEMPLATE.format(
        boat_model=request.vessel_model,
        available_sails=request.available_sails,
        location=location,
        target_date=target_date,
        wind_lines=wind_lines,
    )


def format_wind_line(reading: "WindReading") -> str:
    return f"- {reading.time}: Speed {_format_number(reading.speed)} m/s, Direction {_format_number(reading.direction)}°"


def _format_number(value: float) -> str:
    # Whole numbers render without a trailing ".0" (180, not 180.0).
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)
