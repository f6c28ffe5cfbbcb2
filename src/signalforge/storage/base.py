"""Run store protocol and the rows it persists."""

from dataclasses import dataclass
from typing import Protocol

from signalforge.data import BaselineRecord, ClusterHistory, IdeaClusteredRecord


@dataclass(frozen=True)
class StoredRun:
    """Run metadata as persisted."""

    id: str
    query: str
    window_days: int
    target: str
    mode: str
    created_at: str
    integrity_score: int
    flags: tuple[str, ...] = ()


@dataclass(frozen=True)
class StoredItem:
    """One kept, idea-clustered record of a run as persisted."""

    run_id: str
    title: str
    url: str
    snippet: str
    published_at: str | None
    source: str
    cluster_id: str
    idea_cluster_id: str
    evidence_grade: str
    origin_count: int
    engagement: int | None
    timestamp_tier: str

    @classmethod
    def from_record(
        cls, run_id: str, record: IdeaClusteredRecord, published_at: str | None
    ) -> "StoredItem":
        return cls(
            run_id=run_id,
            title=record.title,
            url=record.url,
            snippet=record.snippet,
            published_at=published_at,
            source=record.source,
            cluster_id=record.cluster_id,
            idea_cluster_id=record.idea_cluster_id,
            evidence_grade=record.evidence_grade.value,
            origin_count=record.origin_count,
            engagement=record.engagement,
            timestamp_tier=record.timestamp_tier.value,
        )


class RunStore(Protocol):
    """Interface for persisting runs and serving baseline lookups."""

    def insert_run(self, run: StoredRun, items: list[StoredItem]) -> bool:
        """Persist a run and its items.

        Must be idempotent per run id: re-submitting a recorded run is a no-op.

        Returns:
            True if the run was written, False if it was already recorded.
        """
        ...

    def fetch_baseline_records(
        self,
        idea_cluster_id: str,
        run_date: str,
        window_days: int,
        lookback_days: int,
    ) -> list[BaselineRecord]:
        """Historical records for an idea cluster, already date-filtered."""
        ...

    def get_cluster_history(
        self,
        idea_cluster_id: str,
        run_date: str,
        lookback_days: int,
    ) -> ClusterHistory:
        """First/last sighting and count for an idea cluster."""
        ...
