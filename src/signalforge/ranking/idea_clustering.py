"""Idea-level clustering across URLs and sources.

Records describing the same underlying story under different URLs (cross-posts,
mirrors, reposts) share a token signature. Within an idea cluster, each
(hostname, signature) pair is one *origin*; the gap between the number of
members and the number of origins is the cluster's echo risk.
"""

import re
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from signalforge.data import (
    EvidenceCategory,
    EvidenceGrade,
    IdeaClusteredRecord,
    IdeaClusterSummary,
    SourceName,
    UrlCluster,
    base_fields,
)
from signalforge.ids import short_hash
from signalforge.url import extract_host

SIGNATURE_TOKEN_COUNT = 5
MIN_TOKEN_LENGTH = 3
MISC_SIGNATURE = "misc"

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+")

STOPWORDS: frozenset[str] = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "and", "any",
        "are", "as", "at", "be", "because", "been", "before", "being", "below",
        "between", "both", "but", "by", "can", "could", "did", "do", "does",
        "doing", "down", "during", "each", "few", "for", "from", "further",
        "had", "has", "have", "having", "he", "her", "here", "hers", "herself",
        "him", "himself", "his", "how", "i", "if", "in", "into", "is", "it",
        "its", "itself", "just", "me", "more", "most", "my", "myself", "no",
        "nor", "not", "now", "of", "off", "on", "once", "only", "or", "other",
        "our", "ours", "ourselves", "out", "over", "own", "same", "she",
        "should", "so", "some", "such", "than", "that", "the", "their",
        "theirs", "them", "themselves", "then", "there", "these", "they",
        "this", "those", "through", "to", "too", "under", "until", "up", "very",
        "was", "we", "were", "what", "when", "where", "which", "while", "who",
        "whom", "why", "with", "you", "your", "yours", "yourself", "yourselves",
    }
)

SOURCE_CATEGORIES: dict[str, EvidenceCategory] = {
    SourceName.REDDIT: EvidenceCategory.DISCUSSION,
    SourceName.HN: EvidenceCategory.DISCUSSION,
    SourceName.GITHUB_ISSUE: EvidenceCategory.IMPLEMENTATION,
    SourceName.GITHUB_RELEASE: EvidenceCategory.IMPLEMENTATION,
    SourceName.YOUTUBE: EvidenceCategory.DEMONSTRATION,
}


def tokenize(text: str) -> list[str]:
    """Lower-case alphanumeric tokens, minus short tokens and stop-words."""
    return [
        token
        for token in _TOKEN_PATTERN.findall(text.lower())
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOPWORDS
    ]


def build_signature(title: str, snippet: str) -> tuple[str, str]:
    """Build the canonical signature and human-readable label for a record.

    The five most frequent tokens of ``title + snippet`` (ties broken
    alphabetically) are sorted and joined with ``|`` for the signature and
    with a space for the label.

    Returns:
        Tuple of (signature, label); ``("misc", "misc")`` when no token
        survives filtering.
    """
    counts = Counter(tokenize(f"{title} {snippet}"))
    top = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:SIGNATURE_TOKEN_COUNT]
    if not top:
        return (MISC_SIGNATURE, MISC_SIGNATURE)
    selected = sorted(token for token, _ in top)
    return ("|".join(selected), " ".join(selected))


def categorize_source(source: str) -> EvidenceCategory:
    """Map a source tag to its evidence category (unknown sources are web)."""
    return SOURCE_CATEGORIES.get(source, EvidenceCategory.WEB)


def derive_evidence_grade(sources: Iterable[str]) -> EvidenceGrade:
    """Grade an idea cluster by the diversity of its corroborating sources.

    Web results are ignored when counting categories.
    """
    categories = {categorize_source(source) for source in sources}
    graded = categories - {EvidenceCategory.WEB}
    if len(graded) >= 2:
        return EvidenceGrade.MULTI_CONFIRMED
    if EvidenceCategory.IMPLEMENTATION in categories:
        return EvidenceGrade.IMPLEMENTATION_CONFIRMED
    return EvidenceGrade.DISCUSSION_ONLY


def clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


@dataclass(frozen=True)
class _Prepared:
    record: UrlCluster
    label: str
    idea_cluster_id: str
    origin_id: str


def cluster_ideas(
    records: Sequence[UrlCluster],
) -> tuple[list[IdeaClusteredRecord], list[IdeaClusterSummary]]:
    """Group URL clusters into idea clusters.

    Args:
        records: Deduplicated records in upstream order.

    Returns:
        Tuple of (annotated records in input order, per-cluster summaries in
        order of first appearance).
    """
    prepared: list[_Prepared] = []
    for record in records:
        signature, label = build_signature(record.title, record.snippet)
        prepared.append(
            _Prepared(
                record=record,
                label=label,
                idea_cluster_id=short_hash(signature),
                origin_id=short_hash(f"{extract_host(record.url)}|{signature}"),
            )
        )

    groups: dict[str, list[_Prepared]] = {}
    for entry in prepared:
        groups.setdefault(entry.idea_cluster_id, []).append(entry)

    summaries: dict[str, IdeaClusterSummary] = {}
    for idea_id, members in groups.items():
        origin_count = len({m.origin_id for m in members})
        item_count = len(members)
        summaries[idea_id] = IdeaClusterSummary(
            id=idea_id,
            label=members[0].label,
            origin_count=origin_count,
            echo_risk=clamp01(1 - origin_count / item_count),
            evidence_grade=derive_evidence_grade(m.record.source for m in members),
            item_count=item_count,
        )

    items: list[IdeaClusteredRecord] = []
    for entry in prepared:
        summary = summaries[entry.idea_cluster_id]
        items.append(
            IdeaClusteredRecord(
                **base_fields(entry.record, UrlCluster),
                idea_cluster_id=entry.idea_cluster_id,
                idea_label=summary.label,
                origin_id=entry.origin_id,
                origin_count=summary.origin_count,
                echo_risk=summary.echo_risk,
                evidence_grade=summary.evidence_grade,
            )
        )

    return (items, list(summaries.values()))
