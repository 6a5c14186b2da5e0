import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from src.models.booking import BookingQuery


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(*parts: str) -> Any:
    with open(FIXTURES_DIR.joinpath(*parts)) as f:
        return json.load(f)


@pytest.fixture
def booking_request():
    """Load a raw booking request body from fixture."""
    return load_fixture("booking_query.json")


@pytest.fixture
def booking_query(booking_request):
    """Booking query built from the raw request fixture."""
    return BookingQuery.model_validate(booking_request)


@pytest.fixture
def available_response():
    """Load a provider response with a positive total charge."""
    return load_fixture("rates_api", "available_response.json")


@pytest.fixture
def zero_charge_response():
    """Load a provider response with a zero total charge and guest errors."""
    return load_fixture("rates_api", "zero_charge_response.json")


@pytest.fixture
def no_rate_response():
    """Load a provider response without a total charge."""
    return load_fixture("rates_api", "no_rate_response.json")


@pytest.fixture
def mock_http_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Factory for an AsyncClient whose requests are answered by a handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
