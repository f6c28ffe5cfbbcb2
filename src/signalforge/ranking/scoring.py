"""Positional scoring of idea-clustered records."""

from signalforge.data import IdeaClusteredRecord, ScoredRecord, base_fields

DEFAULT_START_SCORE = 100.0
DEFAULT_STEP = 3.0


class PositionalScorer:
    """Keep upstream order and assign a decreasing placeholder score.

    The score (``start - step * index``) carries no relevance signal; it only
    gives downstream renderers a stable sort key. A real relevance function
    can replace this class without changing the pipeline contract.

    Args:
        start: Score of the first record.
        step: Decrease per position.
    """

    def __init__(self, start: float = DEFAULT_START_SCORE, step: float = DEFAULT_STEP) -> None:
        self._start = start
        self._step = step

    def rank(
        self,
        records: list[IdeaClusteredRecord],
        top_n: int,
    ) -> list[ScoredRecord]:
        """Score records by position and truncate to ``top_n``.

        Args:
            records: Idea-clustered records in upstream order.
            top_n: Number of records to keep (non-positive keeps none).

        Returns:
            The first ``top_n`` records, scored.
        """
        return [
            ScoredRecord(
                **base_fields(record, IdeaClusteredRecord),
                score=self._start - self._step * index,
            )
            for index, record in enumerate(records[: max(0, top_n)])
        ]
