"""Baseline anchoring: show what changed for the surfaced idea clusters."""

import logging
from collections.abc import Iterable, Sequence

from signalforge.baseline.base import BaselineSource
from signalforge.data import (
    BaselineAnchor,
    BaselineRecord,
    EvidenceGrade,
    IdeaClusteredRecord,
)
from signalforge.ranking.timestamp_tier import parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_DAYS = 180
MAX_BASELINES = 2

_GRADE_RANK: dict[str, int] = {
    EvidenceGrade.DISCUSSION_ONLY: 1,
    EvidenceGrade.IMPLEMENTATION_CONFIRMED: 2,
    EvidenceGrade.MULTI_CONFIRMED: 3,
}


def _priority(record: BaselineRecord) -> tuple[int, int, bool, int]:
    return (
        -_GRADE_RANK.get(record.evidence_grade, 0),
        -record.origin_count,
        record.engagement is None,
        -(record.engagement or 0),
    )


def _published_key(record: BaselineRecord) -> tuple[int, str]:
    parsed = parse_timestamp(record.published_at)
    if parsed is None:
        return (0, record.published_at)
    return (1, parsed.isoformat())


def order_baselines(records: Iterable[BaselineRecord]) -> list[BaselineRecord]:
    """Order baseline candidates, strongest first.

    Keys: evidence grade desc, origin count desc, engagement desc (missing
    engagement after any value), published_at desc, title asc.
    """
    # Stable sorts, least significant key first
    ordered = sorted(records, key=lambda r: r.title)
    ordered.sort(key=_published_key, reverse=True)
    ordered.sort(key=_priority)
    return ordered


def select_baselines(
    records: Iterable[BaselineRecord], limit: int = MAX_BASELINES
) -> list[BaselineRecord]:
    """Return the ``limit`` strongest baseline candidates."""
    return order_baselines(records)[:limit]


def surfaced_clusters(ranked: Sequence[IdeaClusteredRecord]) -> list[tuple[str, str]]:
    """Distinct (idea cluster id, first title) pairs in rank order."""
    seen: dict[str, str] = {}
    for record in ranked:
        seen.setdefault(record.idea_cluster_id, record.title)
    return list(seen.items())


class BaselineAnchorer:
    """Look up historical anchors for the idea clusters a run surfaces.

    Args:
        source: History lookup (usually the run store).
        lookback_days: How far back a containing run may have been created.
        max_baselines: Anchors kept per idea cluster.
        include_history: Also attach sighting history to each anchor.
    """

    def __init__(
        self,
        source: BaselineSource,
        *,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        max_baselines: int = MAX_BASELINES,
        include_history: bool = True,
    ) -> None:
        self._source = source
        self._lookback_days = lookback_days
        self._max_baselines = max_baselines
        self._include_history = include_history

    def anchor(
        self,
        ranked: Sequence[IdeaClusteredRecord],
        *,
        run_date: str,
        window_days: int,
    ) -> list[BaselineAnchor]:
        """Build one anchor per surfaced idea cluster.

        Args:
            ranked: The surfaced (top-N) records.
            run_date: Run date as ``YYYY-MM-DD``.
            window_days: Current collection window; baselines predate it.

        Returns:
            Anchors in rank order. Clusters without history get an anchor
            with no baselines.

        Raises:
            StorageError: If the history lookup fails.
        """
        anchors: list[BaselineAnchor] = []
        for idea_cluster_id, current_title in surfaced_clusters(ranked):
            candidates = self._source.fetch_baseline_records(
                idea_cluster_id,
                run_date,
                window_days,
                self._lookback_days,
            )
            history = None
            if self._include_history:
                history = self._source.get_cluster_history(
                    idea_cluster_id, run_date, self._lookback_days
                )
            anchors.append(
                BaselineAnchor(
                    idea_cluster_id=idea_cluster_id,
                    current_title=current_title,
                    baselines=tuple(select_baselines(candidates, self._max_baselines)),
                    history=history,
                )
            )

        with_baseline = sum(1 for a in anchors if a.baselines)
        logger.info(f"Baseline anchors: {with_baseline}/{len(anchors)} surfaced clusters")
        return anchors
