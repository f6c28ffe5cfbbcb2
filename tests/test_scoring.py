"""Tests for PositionalScorer."""

import pytest

from signalforge.data import IdeaClusteredRecord, ScoredRecord
from signalforge.ranking import PositionalScorer, RecordScorer


def _items(n: int) -> list[IdeaClusteredRecord]:
    return [
        IdeaClusteredRecord(
            title=f"Item {i}",
            url=f"https://example.com/{i}",
            snippet="",
            source="hn",
            idea_cluster_id=f"idea{i}",
        )
        for i in range(n)
    ]


def test_satisfies_protocol() -> None:
    scorer: RecordScorer = PositionalScorer()
    assert hasattr(scorer, "rank")


def test_scores_decrease_by_position() -> None:
    ranked = PositionalScorer().rank(_items(4), top_n=10)
    assert [r.score for r in ranked] == [100.0, 97.0, 94.0, 91.0]
    assert all(isinstance(r, ScoredRecord) for r in ranked)


def test_keeps_upstream_order() -> None:
    ranked = PositionalScorer().rank(_items(3), top_n=3)
    assert [r.title for r in ranked] == ["Item 0", "Item 1", "Item 2"]


def test_truncates_to_top_n() -> None:
    ranked = PositionalScorer().rank(_items(10), top_n=3)
    assert len(ranked) == 3


@pytest.mark.parametrize("top_n", [0, -1])
def test_non_positive_top_n_keeps_nothing(top_n: int) -> None:
    assert PositionalScorer().rank(_items(3), top_n=top_n) == []


def test_custom_start_and_step() -> None:
    ranked = PositionalScorer(start=10.0, step=1.0).rank(_items(2), top_n=2)
    assert [r.score for r in ranked] == [10.0, 9.0]
