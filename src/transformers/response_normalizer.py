"""Normalizer for converting rates provider responses to rate quotes."""

import math
from typing import Any, Optional

from structlog import get_logger

from src.config import settings
from src.models.booking import BookingQuery
from src.models.rate_quote import DEFAULT_ACCOMMODATION_TYPE, RateQuoteResult
from src.transformers.payload_transformer import PayloadTransformer
from src.transformers.rate_description_parser import (
    ParsedRateDescription,
    parse_rate_description,
)

logger = get_logger(__name__)

# Placeholders the provider uses for missing values
DESCRIPTION_NOT_FOUND = "Not Found"
RATE_CODE_NOT_FOUND = "Not_Found"

NO_RATE_INFORMATION = "No rate information available"

# Provider amounts are in minor currency units
MINOR_UNITS_PER_MAJOR = 100


def _as_number(value: Any) -> Optional[float]:
    """Return value as a finite float if it is numeric (numbers or numeric strings)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        result = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    return result if math.isfinite(result) else None


def _non_empty_string(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _legs(response: dict[str, Any]) -> list[dict[str, Any]]:
    legs = response.get("Legs")
    if not isinstance(legs, list):
        return []
    return [leg for leg in legs if isinstance(leg, dict)]


class ResponseNormalizer:
    """Extracts a stable rate quote from loosely structured provider responses."""

    @staticmethod
    def extract_guest_error(response: dict[str, Any]) -> Optional[str]:
        """Return the first non-empty guest error message, in leg then guest order."""
        for leg in _legs(response):
            guests = leg.get("Guests")
            if not isinstance(guests, list):
                continue
            for guest in guests:
                if not isinstance(guest, dict):
                    continue
                message = _non_empty_string(guest.get("Error Message"))
                if message:
                    return message
        return None

    @staticmethod
    def extract_rate(
        response: dict[str, Any],
        unit_type_id: Optional[int] = None,
    ) -> tuple[Optional[float], bool, Optional[str]]:
        """Derive rate, availability and error from "Total Charge".

        Returns:
            Tuple of (rate, availability, error)
        """
        total_charge = _as_number(response.get("Total Charge"))

        if total_charge is not None and total_charge > 0:
            return total_charge / MINOR_UNITS_PER_MAJOR, True, None

        if total_charge == 0:
            # A zero charge may be a free stay or a provider-side rejection
            # (e.g. missing member code); both are reported as unavailable.
            error = ResponseNormalizer.extract_guest_error(response)
            logger.warning(
                "Provider returned zero total charge, marking unavailable",
                unit_type_id=unit_type_id,
                provider_error=error,
            )
            return 0.0, False, error

        return None, False, NO_RATE_INFORMATION

    @staticmethod
    def extract_property_name(
        response: dict[str, Any],
        query: BookingQuery,
    ) -> ParsedRateDescription:
        """Recover the display name from the first usable rate description.

        Falls back to the queried unit name with a generic accommodation type.
        """
        for leg in _legs(response):
            description = _non_empty_string(leg.get("Special Rate Description"))
            if not description or description.strip() == DESCRIPTION_NOT_FOUND:
                continue
            parsed = parse_rate_description(description)
            if parsed is not None:
                return parsed

        return ParsedRateDescription(
            accommodation_type=DEFAULT_ACCOMMODATION_TYPE,
            unit_name=query.unit_name,
        )

    @staticmethod
    def extract_rate_code(response: dict[str, Any]) -> Optional[str]:
        """Return the first usable special rate code, if any."""
        for leg in _legs(response):
            code = _non_empty_string(leg.get("Special Rate Code"))
            if code and code.strip() != RATE_CODE_NOT_FOUND:
                return code
        return None

    @staticmethod
    def normalize(
        response: dict[str, Any],
        query: BookingQuery,
        unit_type_id: int,
    ) -> RateQuoteResult:
        """Normalize one provider response into a RateQuoteResult.

        Args:
            response: Parsed provider response body
            query: The booking query the response answers
            unit_type_id: Unit type the response was requested for

        Returns:
            RateQuoteResult for the unit type
        """
        rate, availability, error = ResponseNormalizer.extract_rate(
            response, unit_type_id
        )
        name = ResponseNormalizer.extract_property_name(response, query)

        result = RateQuoteResult(
            unit_type_id=unit_type_id,
            unit_name=name.unit_name,
            accommodation_type=name.accommodation_type,
            full_name=name.full_name,
            rate=rate,
            date_range=PayloadTransformer.format_date_range(
                query.arrival, query.departure
            ),
            availability=availability,
            occupants=query.occupants,
            error=error,
            location_id=response.get("Location ID"),
            rate_code=ResponseNormalizer.extract_rate_code(response),
            raw_response=response if settings.debug else None,
        )

        logger.info(
            "Normalized provider response",
            unit_type_id=unit_type_id,
            availability=result.availability,
            rate=result.rate,
            rate_code=result.rate_code,
        )
        return result
