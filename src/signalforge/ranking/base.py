"""Scorer protocol for ordering idea-clustered records."""

from typing import Protocol

from signalforge.data import IdeaClusteredRecord, ScoredRecord


class RecordScorer(Protocol):
    """Interface for assigning scores and selecting the records to surface."""

    def rank(
        self,
        records: list[IdeaClusteredRecord],
        top_n: int,
    ) -> list[ScoredRecord]:
        """Score records and return the top-N in presentation order.

        Args:
            records: Idea-clustered records in upstream order.
            top_n: Number of records to keep.

        Returns:
            At most ``top_n`` scored records.
        """
        ...
