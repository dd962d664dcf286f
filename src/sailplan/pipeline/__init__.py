"""
Advice pipeline: forecast filtering, request model and orchestration.
"""

from .dataset import WindReading, build_wind_summary, records_for_date
from .executor import PlanOutcome, PlanState, PlanningPipeline
from .models import PlanRequest

__all__ = [
    "WindReading",
    "build_wind_summary",
    "records_for_date",
    "PlanOutcome",
    "PlanState",
    "PlanningPipeline",
    "PlanRequest",
]
