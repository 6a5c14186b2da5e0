"""Transformer for converting booking queries to the rates provider payload."""

from datetime import datetime

from structlog import get_logger

from src.models.booking import BookingQuery
from src.models.provider import AgeGroup, ProviderGuest, ProviderPayload

logger = get_logger(__name__)

INBOUND_DATE_FORMAT = "%d/%m/%Y"
PROVIDER_DATE_FORMAT = "%Y-%m-%d"

# Guests younger than this are sent as children
ADULT_AGE_THRESHOLD = 18


class MalformedDateError(ValueError):
    """Raised when a query date is not in dd/mm/yyyy format."""

    pass


class PayloadTransformer:
    """Transforms a booking query into the rates provider wire shape."""

    @staticmethod
    def convert_date(value: str) -> str:
        """Convert a dd/mm/yyyy date to yyyy-mm-dd.

        Args:
            value: Date string in dd/mm/yyyy format

        Returns:
            The same calendar date in ISO format

        Raises:
            MalformedDateError: If the value cannot be parsed
        """
        try:
            parsed = datetime.strptime(value, INBOUND_DATE_FORMAT)
        except (TypeError, ValueError) as e:
            raise MalformedDateError(
                f"Invalid date '{value}': expected dd/mm/yyyy"
            ) from e
        return parsed.strftime(PROVIDER_DATE_FORMAT)

    @staticmethod
    def determine_age_group(age: int) -> AgeGroup:
        """Map an occupant age to the provider's age group."""
        return AgeGroup.CHILD if age < ADULT_AGE_THRESHOLD else AgeGroup.ADULT

    @staticmethod
    def format_date_range(arrival: str, departure: str) -> str:
        """Render the stay as 'yyyy-mm-dd to yyyy-mm-dd'.

        Raises:
            MalformedDateError: If either date cannot be parsed
        """
        return (
            f"{PayloadTransformer.convert_date(arrival)} "
            f"to {PayloadTransformer.convert_date(departure)}"
        )

    @staticmethod
    def transform(query: BookingQuery, unit_type_id: int) -> ProviderPayload:
        """Build the provider payload for one unit type.

        Args:
            query: Validated booking query
            unit_type_id: Provider unit type to price

        Returns:
            ProviderPayload ready to be serialized with ``to_wire()``

        Raises:
            MalformedDateError: If a query date is not in dd/mm/yyyy format
        """
        payload = ProviderPayload(
            unit_type_id=unit_type_id,
            arrival=PayloadTransformer.convert_date(query.arrival),
            departure=PayloadTransformer.convert_date(query.departure),
            guests=[
                ProviderGuest(age_group=PayloadTransformer.determine_age_group(age))
                for age in query.ages
            ],
        )

        logger.debug(
            "Built provider payload",
            unit_type_id=unit_type_id,
            arrival=payload.arrival,
            departure=payload.departure,
            guest_count=len(payload.guests),
        )
        return payload
