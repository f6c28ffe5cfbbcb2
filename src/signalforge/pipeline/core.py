"""The pure ranking core: records in, digest out.

No network or clock access happens here; ``now`` and the baseline store are
injected so the same inputs always yield the same digest.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import datetime

from signalforge.baseline import BaselineAnchorer
from signalforge.data import BaselineAnchor, RawRecord, RunCounts, SignalDigest
from signalforge.errors import StorageError
from signalforge.integrity import IntegrityInputs, calculate_integrity_score, fetch_failed_flag
from signalforge.ranking import (
    PositionalScorer,
    RecordScorer,
    apply_tier_policy,
    classify,
    cluster_by_url,
    cluster_ideas,
    count_tiers,
    filter_window,
)

FLAG_WINDOW_FILTERED = "WINDOW_FILTERED"
FLAG_BASELINE_UNAVAILABLE = "BASELINE_UNAVAILABLE"

logger = logging.getLogger(__name__)


def process_signals(
    records: Iterable[RawRecord],
    *,
    window_days: int,
    allow_t4: bool,
    top_n: int,
    now: datetime,
    run_date: str,
    failed_sources: Iterable[str] = (),
    excluded_missing_timestamp: int = 0,
    scorer: RecordScorer | None = None,
    anchorer: BaselineAnchorer | None = None,
) -> SignalDigest:
    """Run every ranking stage over a batch of collected records.

    Stages: window filter, timestamp tiering, tier policy, URL dedup, idea
    clustering, scoring, baseline anchoring, integrity scoring.

    Args:
        records: Records from all collectors, in collection order.
        window_days: Collection window in days.
        allow_t4: Keep records with missing or unparseable timestamps.
        top_n: Number of records to surface.
        now: Reference time for the window filter.
        run_date: Run date (``YYYY-MM-DD``) for baseline lookups.
        failed_sources: Sources whose collector failed.
        excluded_missing_timestamp: Records dropped by collectors before
            they reached the pipeline, reported in the counts.
        scorer: Ranking strategy (defaults to :class:`PositionalScorer`).
        anchorer: Baseline anchorer; without one no anchors are computed.

    Returns:
        SignalDigest with ranked records, clusters, counts, anchors,
        integrity score and sorted run flags.
    """
    collected = list(records)
    windowed = filter_window(collected, window_days, now)
    classified = classify(windowed)
    tier_counts = count_tiers(classified)
    kept, excluded_t4 = apply_tier_policy(classified, allow_t4=allow_t4)

    deduped = cluster_by_url(kept)
    items, clusters = cluster_ideas(deduped)
    ranked = (scorer or PositionalScorer()).rank(items, top_n)

    upstream_flags = frozenset(fetch_failed_flag(source) for source in failed_sources)
    run_flags: set[str] = set(upstream_flags)
    if len(windowed) < len(collected):
        run_flags.add(FLAG_WINDOW_FILTERED)

    anchors: list[BaselineAnchor] = []
    if anchorer is not None:
        try:
            anchors = anchorer.anchor(ranked, run_date=run_date, window_days=window_days)
        except StorageError:
            logger.exception("Baseline lookup failed; continuing without anchors")
            run_flags.add(FLAG_BASELINE_UNAVAILABLE)

    grade_counts = Counter(cluster.evidence_grade.value for cluster in clusters)
    integrity = calculate_integrity_score(
        IntegrityInputs(
            timestamp_tier_counts=tier_counts,
            upstream_flags=upstream_flags,
            kept=len(kept),
            echo_risks=tuple(cluster.echo_risk for cluster in clusters),
            evidence_grade_counts=dict(grade_counts),
            clusters_with_baseline=sum(1 for anchor in anchors if anchor.baselines),
            top_claim_cluster_count=len({record.idea_cluster_id for record in ranked}),
            collected=len(collected),
        )
    )
    run_flags.update(integrity.flags)

    counts = RunCounts(
        collected=len(collected),
        window_kept=len(windowed),
        excluded_window=len(collected) - len(windowed),
        excluded_t4=excluded_t4,
        kept=len(kept),
        excluded_missing_timestamp=excluded_missing_timestamp,
        per_source_counts=dict(Counter(item.source for item in items)),
    )
    logger.info(
        f"Processed {counts.collected} records: {counts.kept} kept, "
        f"{len(clusters)} idea clusters, integrity {integrity.total}/100"
    )

    return SignalDigest(
        items=tuple(items),
        ranked=tuple(ranked),
        clusters=tuple(clusters),
        timestamp_tier_counts=tier_counts,
        counts=counts,
        anchors=tuple(anchors),
        integrity=integrity,
        flags=tuple(sorted(run_flags)),
    )
