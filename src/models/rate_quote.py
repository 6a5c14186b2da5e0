"""Pydantic model for normalized per-unit rate quotes."""

from typing import Any, Optional

from pydantic import BaseModel, Field

DEFAULT_ACCOMMODATION_TYPE = "Accommodation"


class RateQuoteResult(BaseModel):
    """Normalized rate and availability for one unit type.

    Exactly one is produced per requested unit type, including when the
    provider fails; failures are reported through ``error`` with
    ``availability`` False and ``rate`` None.
    """

    unit_type_id: int = Field(alias="unitTypeId")
    unit_name: str = Field(alias="unitName")
    accommodation_type: str = Field(
        default=DEFAULT_ACCOMMODATION_TYPE, alias="accommodationType"
    )
    full_name: str = Field(alias="fullName")
    rate: Optional[float] = Field(None, description="Total in major currency units")
    date_range: str = Field(alias="dateRange", description="'yyyy-mm-dd to yyyy-mm-dd'")
    availability: bool = False
    occupants: int
    error: Optional[str] = None
    location_id: Optional[Any] = Field(None, alias="locationId")
    rate_code: Optional[str] = Field(None, alias="rateCode")
    raw_response: Optional[dict[str, Any]] = Field(
        None,
        alias="rawResponse",
        description="Provider response, only attached in debug mode",
    )

    class Config:
        populate_by_name = True

    def to_response(self) -> dict[str, Any]:
        """Serialize with camelCase keys for the HTTP response.

        ``rawResponse`` is omitted unless it was attached.
        """
        exclude = {"raw_response"} if self.raw_response is None else None
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)
