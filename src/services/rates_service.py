"""Rate aggregation across unit types."""

import asyncio
from typing import Optional

from structlog import get_logger

from src.clients.rates_api_client import RatesAPIClient
from src.clients.retry import TerminalFailure
from src.config import settings
from src.models.booking import BookingQuery
from src.models.rate_quote import DEFAULT_ACCOMMODATION_TYPE, RateQuoteResult
from src.transformers import PayloadTransformer, ResponseNormalizer
from src.transformers.payload_transformer import MalformedDateError

logger = get_logger(__name__)


class RateAggregator:
    """Fetches and normalizes rates for every requested unit type.

    Each unit type runs as its own task. Failures are returned as data in the
    unit's slot; ``fetch_rates`` does not raise.
    """

    def __init__(
        self,
        client: Optional[RatesAPIClient] = None,
        default_unit_type_ids: Optional[list[int]] = None,
        request_deadline: Optional[float] = None,
    ):
        """Initialize the aggregator.

        Args:
            client: Rates client shared by all branches; a fresh one is opened
                per ``fetch_rates`` call if omitted
            default_unit_type_ids: Unit types used when the query selects none
            request_deadline: Seconds allowed for all branches together
        """
        self.client = client
        self.default_unit_type_ids = (
            default_unit_type_ids
            if default_unit_type_ids is not None
            else list(settings.rates_api.default_unit_type_ids)
        )
        self.request_deadline = (
            request_deadline
            if request_deadline is not None
            else settings.rates_api.request_deadline
        )

    def working_set(self, query: BookingQuery) -> list[int]:
        """Unit types to price for this query, in output order."""
        if query.selected_unit_type_id is not None:
            return [query.selected_unit_type_id]
        return list(self.default_unit_type_ids)

    async def fetch_rates(self, query: BookingQuery) -> list[RateQuoteResult]:
        """Fetch rate quotes for every unit type in the working set.

        Args:
            query: Validated booking query

        Returns:
            One RateQuoteResult per unit type, in working-set order
        """
        unit_type_ids = self.working_set(query)

        logger.info(
            "Fetching rates",
            unit_name=query.unit_name,
            unit_type_ids=unit_type_ids,
        )

        if self.client is not None:
            results = await self._fetch_all(self.client, query, unit_type_ids)
        else:
            async with RatesAPIClient() as client:
                results = await self._fetch_all(client, query, unit_type_ids)

        logger.info(
            "Rates fetch complete",
            unit_name=query.unit_name,
            total_units=len(results),
            available_units=sum(1 for r in results if r.availability),
            failed_units=sum(1 for r in results if r.error),
        )
        return results

    async def _fetch_all(
        self,
        client: RatesAPIClient,
        query: BookingQuery,
        unit_type_ids: list[int],
    ) -> list[RateQuoteResult]:
        slots: list[Optional[RateQuoteResult]] = [None] * len(unit_type_ids)

        async def branch(index: int, unit_type_id: int) -> None:
            slots[index] = await self._fetch_unit(client, query, unit_type_id)

        tasks = [
            asyncio.create_task(branch(index, unit_type_id))
            for index, unit_type_id in enumerate(unit_type_ids)
        ]
        if tasks:
            _, pending = await asyncio.wait(tasks, timeout=self.request_deadline)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        for index, unit_type_id in enumerate(unit_type_ids):
            if slots[index] is None:
                logger.error(
                    "Request deadline exceeded before provider responded",
                    unit_type_id=unit_type_id,
                    deadline_seconds=self.request_deadline,
                )
                slots[index] = self._failure_result(
                    query,
                    unit_type_id,
                    f"Request timed out: no provider response within "
                    f"{self.request_deadline:g}s",
                )

        return [result for result in slots if result is not None]

    async def _fetch_unit(
        self,
        client: RatesAPIClient,
        query: BookingQuery,
        unit_type_id: int,
    ) -> RateQuoteResult:
        """Run transform, send and normalize for one unit type."""
        try:
            payload = PayloadTransformer.transform(query, unit_type_id)
            outcome = await client.send(payload)

            if isinstance(outcome, TerminalFailure):
                return self._failure_result(
                    query, unit_type_id, f"API request failed: {outcome.cause}"
                )

            return ResponseNormalizer.normalize(outcome.value, query, unit_type_id)

        except Exception as e:
            logger.error(
                "Failed to process unit type",
                unit_type_id=unit_type_id,
                error=str(e),
                exc_info=True,
            )
            return self._failure_result(
                query, unit_type_id, f"Processing error: {str(e)}"
            )

    @staticmethod
    def _failure_result(
        query: BookingQuery,
        unit_type_id: int,
        error: str,
    ) -> RateQuoteResult:
        """Build the result reported for a unit type whose lookup failed."""
        try:
            date_range = PayloadTransformer.format_date_range(
                query.arrival, query.departure
            )
        except MalformedDateError:
            date_range = f"{query.arrival} to {query.departure}"

        return RateQuoteResult(
            unit_type_id=unit_type_id,
            unit_name=query.unit_name,
            accommodation_type=DEFAULT_ACCOMMODATION_TYPE,
            full_name=f"{query.unit_name} - {DEFAULT_ACCOMMODATION_TYPE}",
            rate=None,
            date_range=date_range,
            availability=False,
            occupants=query.occupants,
            error=error,
        )
