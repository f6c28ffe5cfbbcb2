"""GitHub collector: recent issues plus releases of matching repositories."""

import logging
import os
from datetime import UTC, datetime, timedelta

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

GITHUB_API_BASE = "https://api.github.com"
MAX_ISSUES_PER_PAGE = 10
DEFAULT_REPO_LIMIT = 3
DEFAULT_RELEASE_LIMIT = 3

logger = logging.getLogger(__name__)


class GitHubCollector:
    """Collect implementation evidence from GitHub.

    Emits ``github_issue`` records from the issue search API and
    ``github_release`` records for the most recently updated matching
    repositories.

    Args:
        token: GitHub token (defaults to GITHUB_TOKEN env var; optional).
        repo_limit: Repositories to scan for releases.
        release_limit: Releases fetched per repository.
        timeout: Request timeout in seconds.
    """

    name = "github"

    def __init__(
        self,
        *,
        token: str | None = None,
        repo_limit: int = DEFAULT_REPO_LIMIT,
        release_limit: int = DEFAULT_RELEASE_LIMIT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._token = token or os.environ.get("GITHUB_TOKEN")
        self._repo_limit = repo_limit
        self._release_limit = release_limit
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json", "User-Agent": USER_AGENT}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def collect(
        self,
        query: str,
        *,
        window_days: int,
        limit: int = 10,
        now: datetime | None = None,
    ) -> CollectorResult:
        """Fetch issues created inside the window and recent releases.

        Records gathered before a failure are returned alongside
        ``failed=True``.

        Args:
            query: Topic to search for.
            window_days: Collection window in days.
            limit: Maximum issues to request (capped at 10).
            now: Current time for date filters.

        Returns:
            CollectorResult with ``source="github"``.
        """
        now = now or datetime.now(tz=UTC)
        records: list[RawRecord] = []
        try:
            async with httpx.AsyncClient(timeout=self._timeout, headers=self._headers()) as client:
                records.extend(await self._fetch_issues(client, query, window_days, limit, now))
                records.extend(await self._fetch_releases(client, query, window_days, now))
        except (httpx.HTTPError, ValueError, CollectorError) as e:
            logger.warning(f"GitHub fetch failed for {query!r}: {e}")
            return CollectorResult(source=self.name, records=tuple(records), failed=True)

        logger.info(f"GitHub returned {len(records)} records for {query!r}")
        return CollectorResult(source=self.name, records=tuple(records))

    async def _fetch_issues(
        self,
        client: httpx.AsyncClient,
        query: str,
        window_days: int,
        limit: int,
        now: datetime,
    ) -> list[RawRecord]:
        since = (now - timedelta(days=window_days)).date().isoformat()
        params: dict[str, str | int] = {
            "q": f"{query} created:>={since}",
            "sort": "created",
            "order": "desc",
            "per_page": max(1, min(limit, MAX_ISSUES_PER_PAGE)),
        }
        data = json_object(
            await get_json(client, f"{GITHUB_API_BASE}/search/issues", params=params), self.name
        )
        return [
            RawRecord(
                title=issue.get("title") or "",
                url=issue.get("html_url") or "",
                snippet=build_snippet(issue.get("body")),
                source=SourceName.GITHUB_ISSUE,
                published_at=issue["created_at"],
                engagement=issue.get("comments"),
            )
            for issue in data.get("items") or []
            if issue.get("created_at")
        ]

    async def _fetch_releases(
        self,
        client: httpx.AsyncClient,
        query: str,
        window_days: int,
        now: datetime,
    ) -> list[RawRecord]:
        params: dict[str, str | int] = {
            "q": query,
            "sort": "updated",
            "order": "desc",
            "per_page": self._repo_limit,
        }
        repos = json_object(
            await get_json(client, f"{GITHUB_API_BASE}/search/repositories", params=params),
            self.name,
        )

        releases: list[RawRecord] = []
        for repo in repos.get("items") or []:
            full_name = repo.get("full_name")
            if not full_name:
                continue
            repo_releases = await get_json(
                client,
                f"{GITHUB_API_BASE}/repos/{full_name}/releases",
                params={"per_page": self._release_limit},
            )
            if not isinstance(repo_releases, list):
                raise CollectorError(self.name, f"unexpected releases payload for {full_name}")
            for release in repo_releases:
                published_at = release.get("published_at")
                if not published_at or not is_within_window(published_at, window_days, now):
                    continue
                releases.append(
                    RawRecord(
                        title=release.get("name") or release.get("tag_name") or "",
                        url=release.get("html_url") or "",
                        snippet=build_snippet(release.get("body")),
                        source=SourceName.GITHUB_RELEASE,
                        published_at=published_at,
                    )
                )
        return releases
