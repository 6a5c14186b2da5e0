"""Validation of inbound booking requests."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field
from structlog import get_logger

logger = get_logger(__name__)

UNIT_NAME_KEY = "Unit Name"
UNIT_TYPE_ID_KEY = "Unit Type ID"
DATE_FORMAT = "%d/%m/%Y"
MAX_AGE = 120


class ValidationResult(BaseModel):
    """Outcome of validating a raw booking request."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


class BookingValidationError(ValueError):
    """Raised when a booking request fails validation."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_date(value: Any) -> Optional[datetime]:
    """Parse a strict dd/mm/yyyy date; '1/2/2026' is rejected."""
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return None
    if parsed.strftime(DATE_FORMAT) != value:
        return None
    return parsed


class ValidationService:
    """Checks field presence and format before the rates lookup runs."""

    def validate_booking_request(self, data: Any) -> ValidationResult:
        """Validate a raw booking request body.

        Args:
            data: Decoded JSON request body

        Returns:
            ValidationResult with every error found, in field order
        """
        if not isinstance(data, dict):
            return ValidationResult(
                valid=False, errors=["Request body must be a JSON object"]
            )

        errors: list[str] = []
        self._validate_unit_name(data, errors)
        self._validate_dates(data, errors)
        self._validate_occupants(data, errors)
        self._validate_ages(data, errors)
        self._validate_unit_type_id(data, errors)

        if errors:
            logger.info("Booking request rejected", errors=errors)

        return ValidationResult(valid=not errors, errors=errors)

    def ensure_valid(self, data: Any) -> None:
        """Raise BookingValidationError if the request is invalid."""
        result = self.validate_booking_request(data)
        if not result.valid:
            raise BookingValidationError(result.errors)

    @staticmethod
    def _validate_unit_name(data: dict[str, Any], errors: list[str]) -> None:
        unit_name = data.get(UNIT_NAME_KEY)
        if not isinstance(unit_name, str) or not unit_name.strip():
            errors.append("Unit Name is required and must be a non-empty string")

    @staticmethod
    def _validate_dates(data: dict[str, Any], errors: list[str]) -> None:
        arrival = _parse_date(data.get("Arrival"))
        departure = _parse_date(data.get("Departure"))

        if arrival is None:
            errors.append("Arrival date is required and must be in dd/mm/yyyy format")
        if departure is None:
            errors.append("Departure date is required and must be in dd/mm/yyyy format")

        if arrival and departure and departure <= arrival:
            errors.append("Departure date must be after arrival date")

    @staticmethod
    def _validate_occupants(data: dict[str, Any], errors: list[str]) -> None:
        occupants = data.get("Occupants")
        if not _is_int(occupants) or occupants < 1:
            errors.append("Occupants is required and must be a positive integer")

    @staticmethod
    def _validate_ages(data: dict[str, Any], errors: list[str]) -> None:
        ages = data.get("Ages")
        if not isinstance(ages, list):
            errors.append("Ages is required and must be an array")
            return

        if len(ages) != data.get("Occupants"):
            errors.append("Number of ages must match number of occupants")
            return

        if any(not _is_int(age) or age < 0 or age > MAX_AGE for age in ages):
            errors.append("All ages must be integers between 0 and 120")

    @staticmethod
    def _validate_unit_type_id(data: dict[str, Any], errors: list[str]) -> None:
        if UNIT_TYPE_ID_KEY in data and data[UNIT_TYPE_ID_KEY] is not None:
            if not _is_int(data[UNIT_TYPE_ID_KEY]):
                errors.append("Unit Type ID must be an integer")
