"""Hacker News collector using the Algolia search API."""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from signalforge.collectors.http import (
    DEFAULT_TIMEOUT_SECONDS,
    build_snippet,
    get_json,
    json_object,
)
from signalforge.data import CollectorResult, RawRecord, SourceName
from signalforge.errors import CollectorError

HN_SEARCH_URL = "https://hn.algolia.com/api/v1/search"
HN_ITEM_URL = "https://news.ycombinator.com/item?id={object_id}"
MAX_HITS_PER_PAGE = 50

logger = logging.getLogger(__name__)


def _published_at(hit: dict[str, Any]) -> str | None:
    created_at_i = hit.get("created_at_i")
    if created_at_i:
        return datetime.fromtimestamp(created_at_i, tz=UTC).isoformat()
    return hit.get("created_at") or None


class HNCollector:
    """Collect Hacker News stories matching a query.

    Args:
        timeout: Request timeout in seconds.
    """

    name = "hn"

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    async def collect(
        self,
        query: str,
        *,
        window_days: int,
        limit: int = 10,
        now: datetime | None = None,
    ) -> CollectorResult:
        """Search HN stories; the pipeline applies the window authoritatively.

        Args:
            query: Topic to search for.
            window_days: Collection window (unused by the API call).
            limit: Maximum stories to return (1-50).
            now: Unused; accepted for protocol compatibility.

        Returns:
            CollectorResult with ``source="hn"``.
        """
        params: dict[str, str | int] = {
            "query": query,
            "tags": "story",
            "hitsPerPage": max(1, min(limit, MAX_HITS_PER_PAGE)),
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                payload = json_object(
                    await get_json(client, HN_SEARCH_URL, params=params), self.name
                )
        except (httpx.HTTPError, ValueError, CollectorError) as e:
            logger.warning(f"HN fetch failed for {query!r}: {e}")
            return CollectorResult(source=self.name, failed=True)

        records: list[RawRecord] = []
        for hit in (payload.get("hits") or [])[:limit]:
            title = (hit.get("title") or "").strip() or "Untitled"
            url = (hit.get("url") or "").strip() or HN_ITEM_URL.format(
                object_id=hit.get("objectID", "")
            )
            records.append(
                RawRecord(
                    title=title,
                    url=url,
                    snippet=build_snippet(hit.get("story_text")),
                    source=SourceName.HN,
                    published_at=_published_at(hit),
                    engagement=hit.get("points"),
                )
            )

        logger.info(f"HN returned {len(records)} stories for {query!r}")
        return CollectorResult(source=self.name, records=tuple(records))
