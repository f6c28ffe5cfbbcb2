"""Tests for baseline ordering and the anchorer."""

from unittest.mock import MagicMock

import pytest

from signalforge.baseline import BaselineAnchorer, order_baselines, select_baselines
from signalforge.data import BaselineRecord, ClusterHistory, IdeaClusteredRecord
from signalforge.errors import StorageError


def _baseline(
    title: str,
    *,
    grade: str = "discussion-only",
    origins: int = 1,
    engagement: int | None = None,
    published_at: str = "2024-01-01T00:00:00Z",
) -> BaselineRecord:
    return BaselineRecord(
        title=title,
        url=f"https://example.com/{title}",
        published_at=published_at,
        source="reddit",
        evidence_grade=grade,
        origin_count=origins,
        engagement=engagement,
    )


def _ranked(title: str, idea: str) -> IdeaClusteredRecord:
    return IdeaClusteredRecord(
        title=title,
        url=f"https://example.com/{title}",
        snippet="",
        source="hn",
        idea_cluster_id=idea,
    )


class TestOrdering:
    """Tests for order_baselines / select_baselines."""

    def test_grade_dominates(self) -> None:
        ordered = order_baselines(
            [
                _baseline("low", engagement=1000, origins=5),
                _baseline("high", grade="multi-confirmed"),
                _baseline("mid", grade="implementation-confirmed"),
            ]
        )
        assert [b.title for b in ordered] == ["high", "mid", "low"]

    def test_origin_count_then_engagement(self) -> None:
        ordered = order_baselines(
            [
                _baseline("a", origins=1, engagement=50),
                _baseline("b", origins=2, engagement=1),
                _baseline("c", origins=1, engagement=99),
            ]
        )
        assert [b.title for b in ordered] == ["b", "c", "a"]

    def test_missing_engagement_sorts_last(self) -> None:
        ordered = order_baselines(
            [_baseline("none"), _baseline("zero", engagement=0)]
        )
        assert [b.title for b in ordered] == ["zero", "none"]

    def test_newer_first_then_title(self) -> None:
        ordered = order_baselines(
            [
                _baseline("b", published_at="2024-01-01T00:00:00Z"),
                _baseline("old", published_at="2023-06-01T00:00:00Z"),
                _baseline("a", published_at="2024-01-01T00:00:00Z"),
            ]
        )
        assert [b.title for b in ordered] == ["a", "b", "old"]

    def test_select_limits_to_two(self) -> None:
        selected = select_baselines([_baseline(str(i)) for i in range(5)])
        assert len(selected) == 2


class TestBaselineAnchorer:
    """Tests for BaselineAnchorer."""

    @pytest.fixture
    def source(self) -> MagicMock:
        """Create a mock baseline source."""
        src = MagicMock()
        src.fetch_baseline_records.side_effect = lambda idea, *args: (
            [_baseline("old-a"), _baseline("old-b"), _baseline("old-c")] if idea == "A" else []
        )
        src.get_cluster_history.return_value = ClusterHistory(
            first_seen="2024-01-01T00:00:00Z", last_seen="2024-01-05T00:00:00Z", seen_count=2
        )
        return src

    def test_one_anchor_per_cluster_in_rank_order(self, source: MagicMock) -> None:
        anchorer = BaselineAnchorer(source)
        anchors = anchorer.anchor(
            [_ranked("first", "B"), _ranked("second", "A"), _ranked("third", "B")],
            run_date="2024-02-10",
            window_days=7,
        )
        assert [a.idea_cluster_id for a in anchors] == ["B", "A"]
        assert anchors[0].current_title == "first"
        assert anchors[0].baselines == ()
        assert len(anchors[1].baselines) == 2

    def test_passes_window_and_lookback(self, source: MagicMock) -> None:
        BaselineAnchorer(source, lookback_days=90).anchor(
            [_ranked("x", "A")], run_date="2024-02-10", window_days=7
        )
        source.fetch_baseline_records.assert_called_once_with("A", "2024-02-10", 7, 90)
        source.get_cluster_history.assert_called_once_with("A", "2024-02-10", 90)

    def test_history_is_optional(self, source: MagicMock) -> None:
        anchors = BaselineAnchorer(source, include_history=False).anchor(
            [_ranked("x", "A")], run_date="2024-02-10", window_days=7
        )
        assert anchors[0].history is None
        source.get_cluster_history.assert_not_called()

    def test_storage_errors_propagate(self, source: MagicMock) -> None:
        source.fetch_baseline_records.side_effect = StorageError("db gone")
        with pytest.raises(StorageError):
            BaselineAnchorer(source).anchor(
                [_ranked("x", "A")], run_date="2024-02-10", window_days=7
            )
