"""Business services package."""

from src.services.rates_controller import RatesController
from src.services.rates_service import RateAggregator
from src.services.validation_service import (
    BookingValidationError,
    ValidationResult,
    ValidationService,
)

__all__ = [
    "BookingValidationError",
    "RateAggregator",
    "RatesController",
    "ValidationResult",
    "ValidationService",
]
