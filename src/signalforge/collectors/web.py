"""Web collector backed by the GNews search API."""

import logging
import os
from datetime import UTC, datetime, timedelta

import httpx

from signalforge.collectors.http import (
    DEFAULT_TIMEOUT_SECONDS,
    build_snippet,
    get_json,
    json_object,
)
from signalforge.data import CollectorResult, RawRecord, SourceName
from signalforge.errors import CollectorError

GNEWS_API_URL = "https://gnews.io/api/v4/search"
GNEWS_MAX_RESULTS = 100

logger = logging.getLogger(__name__)


class WebCollector:
    """Collect general web/news results using the GNews API.

    Web results carry no evidence category of their own; they add volume
    and context but never raise an idea cluster's evidence grade.

    Args:
        api_key: GNews API key (defaults to GNEWS_API_KEY env var).
        lang: Language code for results (default: "en").
        timeout: Request timeout in seconds.
    """

    name = "web"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        lang: str = "en",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key or os.environ.get("GNEWS_API_KEY")
        if not self._api_key:
            raise ValueError("GNews API key required. Pass api_key or set GNEWS_API_KEY env var.")
        self._lang = lang
        self._timeout = timeout

    async def collect(
        self,
        query: str,
        *,
        window_days: int,
        limit: int = 10,
        now: datetime | None = None,
    ) -> CollectorResult:
        """Search GNews for articles published inside the window.

        Args:
            query: Topic to search for.
            window_days: Collection window in days (sent as ``from``).
            limit: Maximum articles to return (max 100).
            now: Current time for the ``from`` date.

        Returns:
            CollectorResult with ``source="web"``.
        """
        now = now or datetime.now(tz=UTC)
        params: dict[str, str | int] = {
            "q": query,
            "lang": self._lang,
            "max": max(1, min(limit, GNEWS_MAX_RESULTS)),
            "apikey": self._api_key,  # type: ignore[dict-item]
            "from": (now - timedelta(days=window_days)).strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                data = json_object(
                    await get_json(client, GNEWS_API_URL, params=params), self.name
                )
        except (httpx.HTTPError, ValueError, CollectorError) as e:
            logger.warning(f"GNews fetch failed for {query!r}: {e}")
            return CollectorResult(source=self.name, failed=True)

        records = [
            RawRecord(
                title=item.get("title") or "",
                url=item.get("url") or "",
                snippet=build_snippet(item.get("description")),
                source=SourceName.WEB,
                published_at=item.get("publishedAt"),
            )
            for item in data.get("articles") or []
            if item.get("url")
        ]
        logger.info(f"GNews returned {len(records)} articles for {query!r}")
        return CollectorResult(source=self.name, records=tuple(records))
