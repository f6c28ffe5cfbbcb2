"""Reddit collector using the public JSON search endpoint."""

import logging
import re
from datetime import UTC, datetime
from typing import Any

import httpx

from signalforge.collectors.http import (
    DEFAULT_TIMEOUT_SECONDS,
    USER_AGENT,
    build_snippet,
    get_json,
    json_object,
)
from signalforge.data import CollectorResult, RawRecord, SourceName
from signalforge.errors import CollectorError
from signalforge.ranking.timestamp_tier import is_within_window

REDDIT_BASE_URL = "https://www.reddit.com"

_SUBREDDIT_QUERY = re.compile(r"^r/([A-Za-z0-9_]+)\s*(.*)$")

logger = logging.getLogger(__name__)


def parse_subreddit_query(query: str) -> tuple[str | None, str]:
    """Split ``"r/<sub> rest"`` into (subreddit, search text)."""
    trimmed = query.strip()
    match = _SUBREDDIT_QUERY.match(trimmed)
    if not match:
        return (None, trimmed)
    return (match.group(1), match.group(2).strip())


class RedditCollector:
    """Collect recent Reddit posts matching a query.

    Queries of the form ``r/<subreddit> terms`` are restricted to that
    subreddit. Posts without ``created_utc`` are excluded and counted.

    Args:
        timeout: Request timeout in seconds.
    """

    name = "reddit"

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    def _search_request(self, query: str, limit: int) -> tuple[str, dict[str, str | int]]:
        subreddit, search = parse_subreddit_query(query)
        params: dict[str, str | int] = {
            "q": search or query,
            "sort": "new",
            "t": "month",
            "limit": limit,
        }
        if subreddit:
            params["restrict_sr"] = "on"
            return (f"{REDDIT_BASE_URL}/r/{subreddit}/search.json", params)
        return (f"{REDDIT_BASE_URL}/search.json", params)

    async def collect(
        self,
        query: str,
        *,
        window_days: int,
        limit: int = 10,
        now: datetime | None = None,
    ) -> CollectorResult:
        """Search Reddit and pre-filter posts to the window.

        Args:
            query: Topic, optionally prefixed with ``r/<subreddit>``.
            window_days: Collection window in days.
            limit: Maximum posts to request.
            now: Current time for the window pre-filter.

        Returns:
            CollectorResult with ``source="reddit"``.
        """
        url, params = self._search_request(query, limit)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, headers={"User-Agent": USER_AGENT}
            ) as client:
                payload = json_object(await get_json(client, url, params=params), self.name)
        except (httpx.HTTPError, ValueError, CollectorError) as e:
            logger.warning(f"Reddit fetch failed for {query!r}: {e}")
            return CollectorResult(source=self.name, failed=True, strategy_used="reddit_json")

        now = now or datetime.now(tz=UTC)
        records, excluded = self._parse_listing(payload, window_days, now)
        logger.info(
            f"Reddit returned {len(records)} posts for {query!r} "
            f"({excluded} without timestamp)"
        )
        return CollectorResult(
            source=self.name,
            records=tuple(records),
            excluded_missing_timestamp=excluded,
            strategy_used="reddit_json",
        )

    @staticmethod
    def _parse_listing(
        payload: dict[str, Any], window_days: int, now: datetime
    ) -> tuple[list[RawRecord], int]:
        children = (payload.get("data") or {}).get("children") or []
        records: list[RawRecord] = []
        excluded = 0
        for child in children:
            data = child.get("data") or {}
            created_utc = data.get("created_utc")
            if not created_utc:
                excluded += 1
                continue
            published_at = datetime.fromtimestamp(created_utc, tz=UTC).isoformat()
            if not is_within_window(published_at, window_days, now):
                continue
            records.append(
                RawRecord(
                    title=data.get("title") or "",
                    url=f"{REDDIT_BASE_URL}{data.get('permalink') or ''}",
                    snippet=build_snippet(data.get("selftext")),
                    source=SourceName.REDDIT,
                    published_at=published_at,
                    engagement=data.get("score"),
                )
            )
        return (records, excluded)
