"""Boundary handler for rate lookup requests."""

import json
from typing import Any, Optional, Union

from structlog import get_logger

from src.models.booking import BookingQuery
from src.services.rates_service import RateAggregator
from src.services.validation_service import (
    BookingValidationError,
    ValidationService,
)

logger = get_logger(__name__)


class RatesController:
    """Decodes, validates and answers a rates request.

    Owns the response envelope only; pricing lives in RateAggregator.
    """

    def __init__(
        self,
        aggregator: Optional[RateAggregator] = None,
        validation_service: Optional[ValidationService] = None,
    ):
        self.aggregator = aggregator or RateAggregator()
        self.validation_service = validation_service or ValidationService()

    async def get_rates(
        self, body: Union[str, bytes, dict[str, Any], None]
    ) -> tuple[int, dict[str, Any]]:
        """Handle one rates request.

        Args:
            body: Raw JSON request body, or an already decoded mapping

        Returns:
            Tuple of (HTTP status code, response payload)
        """
        try:
            if isinstance(body, dict):
                data = body
            else:
                try:
                    data = json.loads(body or "")
                except (json.JSONDecodeError, UnicodeDecodeError):
                    logger.info("Rejected request with invalid JSON body")
                    return 400, {
                        "success": False,
                        "error": "Invalid JSON",
                        "message": "Request body must be valid JSON",
                    }

            self.validation_service.ensure_valid(data)

            query = BookingQuery.model_validate(data)
            results = await self.aggregator.fetch_rates(query)
            return 200, {
                "success": True,
                "data": [result.to_response() for result in results],
            }

        except BookingValidationError as e:
            return 400, {
                "success": False,
                "error": "Validation Error",
                "message": "Invalid request data",
                "details": e.errors,
            }
        except Exception as e:
            logger.error(
                "Rates request failed",
                error=str(e),
                exc_info=True,
            )
            return 500, {
                "success": False,
                "error": "Processing Error",
                "message": str(e),
            }
