"""API clients package."""

from src.clients.rates_api_client import (
    RatesAPIClient,
    RatesAPIClientError,
    RatesAPIProtocolError,
    RatesAPITransportError,
)
from src.clients.retry import (
    RetryOutcome,
    RetryPolicy,
    RetrySuccess,
    TerminalFailure,
    execute_with_retry,
)

__all__ = [
    "RatesAPIClient",
    "RatesAPIClientError",
    "RatesAPIProtocolError",
    "RatesAPITransportError",
    "RetryOutcome",
    "RetryPolicy",
    "RetrySuccess",
    "TerminalFailure",
    "execute_with_retry",
]
