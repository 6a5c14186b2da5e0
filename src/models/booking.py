"""Pydantic models for inbound booking queries."""

from typing import Optional

from pydantic import BaseModel, Field


class BookingQuery(BaseModel):
    """A single accommodation booking query as received at the boundary.

    Dates stay in their inbound ``dd/mm/yyyy`` form; the payload transformer
    owns conversion to the provider's ISO format.
    """

    unit_name: str = Field(alias="Unit Name")
    arrival: str = Field(alias="Arrival", description="Arrival date, dd/mm/yyyy")
    departure: str = Field(alias="Departure", description="Departure date, dd/mm/yyyy")
    occupants: int = Field(alias="Occupants", gt=0)
    ages: list[int] = Field(default_factory=list, alias="Ages")
    selected_unit_type_id: Optional[int] = Field(
        None,
        alias="Unit Type ID",
        description="Restricts the lookup to one unit type instead of the configured defaults",
    )

    class Config:
        extra = "ignore"
        populate_by_name = True
