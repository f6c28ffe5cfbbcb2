"""Timestamp tiering, clustering and scoring stages."""

from signalforge.ranking.base import RecordScorer
from signalforge.ranking.clustering import cluster_by_url
from signalforge.ranking.idea_clustering import (
    build_signature,
    categorize_source,
    cluster_ideas,
    derive_evidence_grade,
)
from signalforge.ranking.scoring import PositionalScorer
from signalforge.ranking.timestamp_tier import (
    apply_tier_policy,
    assign_timestamp_tier,
    classify,
    count_tiers,
    filter_window,
    is_within_window,
    parse_timestamp,
)

__all__ = [
    "PositionalScorer",
    "RecordScorer",
    "apply_tier_policy",
    "assign_timestamp_tier",
    "build_signature",
    "categorize_source",
    "classify",
    "cluster_by_url",
    "cluster_ideas",
    "count_tiers",
    "derive_evidence_grade",
    "filter_window",
    "is_within_window",
    "parse_timestamp",
]
