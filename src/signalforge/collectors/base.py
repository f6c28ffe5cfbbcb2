"""Collector protocol."""

from datetime import datetime
from typing import Protocol

from signalforge.data import CollectorResult


class Collector(Protocol):
    """Interface for fetching raw records from one public source.

    Collectors own retries and timeouts. A collector that cannot fetch
    returns a result with ``failed=True`` (and whatever records it got)
    rather than raising.
    """

    name: str

    async def collect(
        self,
        query: str,
        *,
        window_days: int,
        limit: int = 10,
        now: datetime | None = None,
    ) -> CollectorResult:
        """Fetch records about ``query``.

        Args:
            query: Topic to search for.
            window_days: Collection window; collectors may pre-filter with it.
            limit: Soft cap on records to fetch.
            now: Current time, injected for determinism.

        Returns:
            CollectorResult for this source.
        """
        ...
