"""Protocol for the history lookups baseline anchoring depends on."""

from typing import Protocol

from signalforge.data import BaselineRecord, ClusterHistory


class BaselineSource(Protocol):
    """Read-only access to historical run items."""

    def fetch_baseline_records(
        self,
        idea_cluster_id: str,
        run_date: str,
        window_days: int,
        lookback_days: int,
    ) -> list[BaselineRecord]:
        """Return historical records for an idea cluster.

        Implementations return only records with a non-null timestamp strictly
        before ``run_date - window_days`` whose run was created within
        ``lookback_days`` of ``run_date``. Ordering is not required.
        """
        ...

    def get_cluster_history(
        self,
        idea_cluster_id: str,
        run_date: str,
        lookback_days: int,
    ) -> ClusterHistory:
        """Return first/last sighting and sighting count for an idea cluster."""
        ...
