"""Integrity scoring: an auditable 0-100 trust score for a run.

The score is the clamped sum of five independently clamped components:

- ``timestamp`` (0-30): penalises lower-trust timestamp tiers.
- ``sources`` (0-25): penalises failed collectors and low volume.
- ``independence`` (0-20): rewards low median echo risk across idea clusters.
- ``evidence`` (0-15): rewards multi-confirmed and implementation-confirmed ideas.
- ``baseline`` (0-10): rewards historical continuity for surfaced clusters.

Degradation flags are derived from the same inputs and are order-independent.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import numpy as np

from signalforge.data import (
    EchoRiskStats,
    EvidenceGrade,
    IntegrityComponents,
    IntegrityScore,
    TimestampTier,
)

FETCH_FAILED_SUFFIX = "_FETCH_FAILED"
SOURCE_FAILURE_PREFIX = "SOURCE_FAILURE_"

FLAG_LOW_VOLUME = "DEGRADED_SIGNAL_LOW_VOLUME"
FLAG_LOW_TIMESTAMP_TRUST = "DEGRADED_SIGNAL_LOW_TIMESTAMP_TRUST"
FLAG_HIGH_ECHO_RISK = "DEGRADED_SIGNAL_HIGH_ECHO_RISK"
FLAG_LOW_EVIDENCE = "DEGRADED_SIGNAL_LOW_EVIDENCE"
FLAG_NO_SOURCES = "NO_SOURCES"

LOW_VOLUME_THRESHOLD = 5
LOW_TIMESTAMP_TRUST_PERCENT = 20.0
HIGH_ECHO_RISK_MEDIAN = 0.6

TIMESTAMP_MAX = 30.0
SOURCES_MAX = 25.0
INDEPENDENCE_MAX = 20.0
EVIDENCE_MAX = 15.0
BASELINE_MAX = 10.0


@dataclass(frozen=True)
class IntegrityInputs:
    """Everything the integrity scorer reads.

    Attributes:
        timestamp_tier_counts: Records per tier over the window-filtered set.
        upstream_flags: Flags raised before scoring (``<SOURCE>_FETCH_FAILED``).
        kept: Records kept after tier policy.
        echo_risks: Echo risk of every idea cluster.
        evidence_grade_counts: Idea clusters per evidence grade.
        clusters_with_baseline: Surfaced idea clusters with at least one baseline.
        top_claim_cluster_count: Distinct idea clusters among surfaced records.
        collected: Records received from all collectors, before any filtering.
            ``None`` when unknown (the no-sources rule is then skipped).
    """

    timestamp_tier_counts: Mapping[str, int] = field(default_factory=dict)
    upstream_flags: frozenset[str] = frozenset()
    kept: int = 0
    echo_risks: tuple[float, ...] = ()
    evidence_grade_counts: Mapping[str, int] = field(default_factory=dict)
    clusters_with_baseline: int = 0
    top_claim_cluster_count: int = 0
    collected: int | None = None


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _percent(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return count / total * 100


def _ratio(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return count / total


def summarize_echo_risk(values: Iterable[float]) -> EchoRiskStats:
    """Min/median/max of echo risk; all zero when there are no clusters."""
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return EchoRiskStats()
    return EchoRiskStats(
        min=float(arr.min()),
        median=float(np.median(arr)),
        max=float(arr.max()),
    )


def failed_sources(flags: Iterable[str]) -> list[str]:
    """Source names with a ``<SOURCE>_FETCH_FAILED`` flag, sorted and distinct."""
    return sorted(
        {
            flag[: -len(FETCH_FAILED_SUFFIX)]
            for flag in flags
            if flag.endswith(FETCH_FAILED_SUFFIX) and len(flag) > len(FETCH_FAILED_SUFFIX)
        }
    )


def fetch_failed_flag(source: str) -> str:
    """Upstream flag raised when the collector for ``source`` fails."""
    return f"{source.upper()}{FETCH_FAILED_SUFFIX}"


def calculate_integrity_score(inputs: IntegrityInputs) -> IntegrityScore:
    """Compute the integrity score, its components and degradation flags.

    Args:
        inputs: Aggregated run statistics.

    Returns:
        IntegrityScore with ``total`` in [0, 100].
    """
    tier_counts = inputs.timestamp_tier_counts
    total_timestamped = sum(tier_counts.values())
    pct_t3 = _percent(tier_counts.get(TimestampTier.T3.value, 0), total_timestamped)
    pct_t4 = _percent(tier_counts.get(TimestampTier.T4.value, 0), total_timestamped)
    timestamp = clamp(
        TIMESTAMP_MAX - 2 * round_half_up(pct_t3) - 5 * round_half_up(pct_t4),
        0.0,
        TIMESTAMP_MAX,
    )

    failures = failed_sources(inputs.upstream_flags)
    sources_penalty = min(20, 10 * len(failures)) + (5 if inputs.kept < LOW_VOLUME_THRESHOLD else 0)
    sources = clamp(SOURCES_MAX - sources_penalty, 0.0, SOURCES_MAX)

    echo_stats = summarize_echo_risk(inputs.echo_risks)
    median_echo = clamp(echo_stats.median, 0.0, 1.0)
    independence = clamp(INDEPENDENCE_MAX * (1 - median_echo), 0.0, INDEPENDENCE_MAX)

    grade_counts = inputs.evidence_grade_counts
    graded_total = sum(grade_counts.values())
    multi_ratio = _ratio(grade_counts.get(EvidenceGrade.MULTI_CONFIRMED.value, 0), graded_total)
    impl_ratio = _ratio(
        grade_counts.get(EvidenceGrade.IMPLEMENTATION_CONFIRMED.value, 0), graded_total
    )
    evidence = clamp(
        5 + min(10.0, 10 * multi_ratio) + min(5.0, 5 * impl_ratio),
        0.0,
        EVIDENCE_MAX,
    )

    baseline = 0.0
    if inputs.clusters_with_baseline > 0:
        baseline = clamp(
            BASELINE_MAX * inputs.clusters_with_baseline / max(1, inputs.top_claim_cluster_count),
            0.0,
            BASELINE_MAX,
        )

    components = IntegrityComponents(
        timestamp=timestamp,
        sources=sources,
        independence=independence,
        evidence=evidence,
        baseline=baseline,
    )

    flags: set[str] = set()
    if inputs.kept < LOW_VOLUME_THRESHOLD:
        flags.add(FLAG_LOW_VOLUME)
    if pct_t3 + pct_t4 >= LOW_TIMESTAMP_TRUST_PERCENT:
        flags.add(FLAG_LOW_TIMESTAMP_TRUST)
    if median_echo >= HIGH_ECHO_RISK_MEDIAN:
        flags.add(FLAG_HIGH_ECHO_RISK)
    if multi_ratio == 0 and impl_ratio == 0:
        flags.add(FLAG_LOW_EVIDENCE)
    flags.update(f"{SOURCE_FAILURE_PREFIX}{source}" for source in failures)

    total = round_half_up(clamp(components.total, 0.0, 100.0))
    if inputs.collected == 0:
        flags.add(FLAG_NO_SOURCES)
        total = 0

    return IntegrityScore(
        total=total,
        components=components,
        flags=frozenset(flags),
        echo_risk_stats=echo_stats,
    )
