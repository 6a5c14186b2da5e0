"""Pydantic models for the rates provider wire format."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AgeGroup(str, Enum):
    """Occupant classification sent to the provider instead of raw ages."""

    CHILD = "Child"
    ADULT = "Adult"


class ProviderGuest(BaseModel):
    """One guest entry in the provider payload."""

    age_group: AgeGroup = Field(alias="Age Group")

    class Config:
        populate_by_name = True
        use_enum_values = True


class ProviderPayload(BaseModel):
    """Request body POSTed to the rates provider for one unit type."""

    unit_type_id: int = Field(alias="Unit Type ID")
    arrival: str = Field(alias="Arrival", description="ISO date, yyyy-mm-dd")
    departure: str = Field(alias="Departure", description="ISO date, yyyy-mm-dd")
    guests: list[ProviderGuest] = Field(default_factory=list, alias="Guests")

    class Config:
        populate_by_name = True

    def to_wire(self) -> dict[str, Any]:
        """Serialize using the provider's field names."""
        return self.model_dump(mode="json", by_alias=True)
