"""
Input model for a single sail-plan request.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel

from ..api.geocode import compose_location

_FIELD_LABELS = {
    "city": "city",
    "region": "state/province",
    "country": "country",
    "vessel_model": "boat model",
    "available_sails": "available sails",
}


class PlanRequest(BaseModel):
    """
    What the caller knows about the trip and the boat.

    Attributes:
        city: Destination city.
        region: State, province or region.
        country: Country name or code.
        vessel_model: Boat model (e.g., "J/24").
        available_sails: Free-text description of the sails aboard.
    """
    city: str = ""
    region: str = ""
    country: str = ""
    vessel_model: str = ""
    available_sails: str = ""

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @property
    def location(self) -> str:
        """Composite location text used for geocoding and in the prompt."""
        return compose_location(self.city, self.region, self.country)

    def blank_fields(self) -> List[str]:
        """Return human labels for the required fields that are empty."""
        return [label for name, label in _FIELD_LABELS.items() if not getattr(self, name)]
