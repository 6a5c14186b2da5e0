"""Rates provider API client with bounded retries."""

import asyncio
import json
from typing import Any, Awaitable, Callable, Literal, Optional

import httpx
from structlog import get_logger

from src.clients.retry import (
    RetryableError,
    RetryOutcome,
    RetryPolicy,
    execute_with_retry,
)
from src.config import settings
from src.models.provider import ProviderPayload

logger = get_logger(__name__)


class RatesAPIClientError(RetryableError):
    """Base exception for rates provider errors."""

    pass


class RatesAPITransportError(RatesAPIClientError):
    """Raised when the provider cannot be reached or times out."""

    kind: Literal["transport", "protocol"] = "transport"


class RatesAPIProtocolError(RatesAPIClientError):
    """Raised on a non-2xx status or a response body that is not a JSON object."""

    kind: Literal["transport", "protocol"] = "protocol"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RatesAPIClient:
    """Client for the third-party rates provider.

    One instance may serve several concurrent ``send`` calls; they share the
    underlying ``httpx.AsyncClient`` connection pool.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        policy: Optional[RetryPolicy] = None,
        url: Optional[str] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the rates client with settings.

        Args:
            http_client: Shared HTTP client; one is created and owned if omitted
            policy: Retry policy; defaults to the configured policy
            url: Provider endpoint; defaults to RATES_API_URL
            sleep: Awaitable used between attempts
        """
        self.url = url or settings.rates_api.url
        self.policy = policy or RetryPolicy.from_settings()
        self._sleep = sleep
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(headers=self._get_headers())

    async def __aenter__(self) -> "RatesAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    @staticmethod
    def _get_headers() -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"RatesAggregator/{settings.api_version}",
        }

    async def _attempt(self, payload: ProviderPayload, attempt: int) -> dict[str, Any]:
        """Make a single POST to the provider.

        Args:
            payload: Provider payload for one unit type
            attempt: Zero-based attempt index, selects the timeout

        Returns:
            Parsed JSON response body

        Raises:
            RatesAPITransportError: On connection failure or timeout
            RatesAPIProtocolError: On non-2xx status or unparsable body
        """
        timeout = self.policy.timeout_for(attempt)

        try:
            # httpx applies the timeout per phase; wait_for caps the whole attempt
            response = await asyncio.wait_for(
                self._http_client.post(
                    self.url,
                    json=payload.to_wire(),
                    headers=self._get_headers(),
                    timeout=timeout,
                ),
                timeout=timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise RatesAPITransportError(
                f"Connection to rates provider timed out after {timeout:g}s"
            ) from e
        except httpx.RequestError as e:
            raise RatesAPITransportError(
                f"Connection to rates provider failed: {e}"
            ) from e

        if not response.is_success:
            logger.debug(
                "Rates provider returned error status",
                unit_type_id=payload.unit_type_id,
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            raise RatesAPIProtocolError(
                f"Rates provider returned HTTP status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RatesAPIProtocolError(
                "Rates provider returned an unparsable response body",
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            raise RatesAPIProtocolError(
                f"Rates provider returned {type(body).__name__} instead of a JSON object",
                status_code=response.status_code,
            )

        logger.debug(
            "Rates provider request successful",
            unit_type_id=payload.unit_type_id,
            attempt=attempt + 1,
            status_code=response.status_code,
        )
        return body

    async def send(self, payload: ProviderPayload) -> RetryOutcome:
        """Send a payload, retrying per the policy.

        Args:
            payload: Provider payload for one unit type

        Returns:
            RetrySuccess whose value is the response body, or TerminalFailure
        """
        logger.info(
            "Requesting rates from provider",
            unit_type_id=payload.unit_type_id,
            arrival=payload.arrival,
            departure=payload.departure,
        )
        return await execute_with_retry(
            lambda attempt: self._attempt(payload, attempt),
            self.policy,
            sleep=self._sleep,
            log_context={"unit_type_id": payload.unit_type_id},
        )
