"""Core data models for SignalForge."""

from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import Any


class SourceName(StrEnum):
    """Source tag carried by every collected record."""

    REDDIT = "reddit"
    HN = "hn"
    WEB = "web"
    GITHUB_ISSUE = "github_issue"
    GITHUB_RELEASE = "github_release"
    YOUTUBE = "youtube"


class TimestampTier(StrEnum):
    """Temporal trust of a record's ``published_at``.

    Only ``T1`` (valid timestamp) and ``T4`` (missing or unparseable) are
    assigned today. ``T2`` and ``T3`` are reserved for intermediate tiers and
    already take part in the integrity formula.
    """

    T1 = "T1"
    T2 = "T2"
    T3 = "T3"
    T4 = "T4"


class EvidenceCategory(StrEnum):
    """Kind of corroboration a source provides."""

    DISCUSSION = "discussion"
    IMPLEMENTATION = "implementation"
    DEMONSTRATION = "demonstration"
    WEB = "web"


class EvidenceGrade(StrEnum):
    """Confidence level of an idea cluster, weakest first."""

    DISCUSSION_ONLY = "discussion-only"
    IMPLEMENTATION_CONFIRMED = "implementation-confirmed"
    MULTI_CONFIRMED = "multi-confirmed"


@dataclass(frozen=True)
class RawRecord:
    """A single signal as produced by a collector."""

    title: str
    url: str
    snippet: str
    source: str
    published_at: str | None = None
    engagement: int | None = None


@dataclass(frozen=True)
class TimestampedRecord(RawRecord):
    """A record with its assigned timestamp tier."""

    timestamp_tier: TimestampTier = TimestampTier.T4


@dataclass(frozen=True)
class UrlCluster(TimestampedRecord):
    """The surviving record for one distinct URL."""

    cluster_id: str = ""


@dataclass(frozen=True)
class IdeaClusteredRecord(UrlCluster):
    """A URL cluster annotated with its idea cluster and the cluster aggregates."""

    idea_cluster_id: str = ""
    idea_label: str = ""
    origin_id: str = ""
    origin_count: int = 1
    echo_risk: float = 0.0
    evidence_grade: EvidenceGrade = EvidenceGrade.DISCUSSION_ONLY


@dataclass(frozen=True)
class ScoredRecord(IdeaClusteredRecord):
    """An idea-clustered record with its rank-derived score."""

    score: float = 0.0


@dataclass(frozen=True)
class IdeaClusterSummary:
    """Aggregate view of one idea cluster."""

    id: str
    label: str
    origin_count: int
    echo_risk: float
    evidence_grade: EvidenceGrade
    item_count: int


@dataclass(frozen=True)
class IntegrityComponents:
    """The five independently clamped integrity sub-scores."""

    timestamp: float
    sources: float
    independence: float
    evidence: float
    baseline: float

    @property
    def total(self) -> float:
        return self.timestamp + self.sources + self.independence + self.evidence + self.baseline


@dataclass(frozen=True)
class EchoRiskStats:
    """Spread of echo risk across idea clusters."""

    min: float = 0.0
    median: float = 0.0
    max: float = 0.0


@dataclass(frozen=True)
class IntegrityScore:
    """Composite 0-100 trust score with its components and degradation flags."""

    total: int
    components: IntegrityComponents
    flags: frozenset[str] = frozenset()
    echo_risk_stats: EchoRiskStats = EchoRiskStats()


@dataclass(frozen=True)
class BaselineRecord:
    """A historical record of the same idea, published before the current window."""

    title: str
    url: str
    published_at: str
    source: str
    evidence_grade: EvidenceGrade | str
    origin_count: int
    engagement: int | None = None


@dataclass(frozen=True)
class ClusterHistory:
    """How often an idea cluster has been seen over the lookback horizon."""

    first_seen: str | None = None
    last_seen: str | None = None
    seen_count: int = 0


@dataclass(frozen=True)
class BaselineAnchor:
    """Baseline context ("what changed") for one surfaced idea cluster."""

    idea_cluster_id: str
    current_title: str
    baselines: tuple[BaselineRecord, ...] = ()
    history: ClusterHistory | None = None


@dataclass(frozen=True)
class CollectorResult:
    """Output of one collector for one run."""

    source: str
    records: tuple[RawRecord, ...] = ()
    failed: bool = False
    excluded_missing_timestamp: int = 0
    strategy_used: str | None = None


@dataclass(frozen=True)
class RunCounts:
    """Record counts at each filtering step of a run."""

    collected: int = 0
    window_kept: int = 0
    excluded_window: int = 0
    excluded_t4: int = 0
    kept: int = 0
    excluded_missing_timestamp: int = 0
    per_source_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SignalDigest:
    """Everything the pipeline computed for one batch of records.

    ``items`` holds every kept, deduplicated, idea-clustered record in
    upstream order; ``ranked`` is the scored top-N slice of it.
    """

    items: tuple[IdeaClusteredRecord, ...]
    ranked: tuple[ScoredRecord, ...]
    clusters: tuple[IdeaClusterSummary, ...]
    timestamp_tier_counts: dict[str, int]
    counts: RunCounts
    anchors: tuple[BaselineAnchor, ...]
    integrity: IntegrityScore
    flags: tuple[str, ...]


@dataclass
class RunResult:
    """Structured result handed back to the caller of a run."""

    run_id: str
    integrity_score: int
    flags: list[str]
    digest: SignalDigest
    context_block_text: str = ""
    artifacts: dict[str, str] = field(default_factory=dict)
    storage_error: str | None = None
    artifacts_error: str | None = None

    def to_response(self) -> dict[str, Any]:
        """Return the JSON-compatible payload exposed to front ends."""
        return {
            "run_id": self.run_id,
            "integrity_score": self.integrity_score,
            "flags": list(self.flags),
            "artifacts": dict(self.artifacts),
            "context_block_text": self.context_block_text,
            "storage_error": self.storage_error,
            "artifacts_error": self.artifacts_error,
        }


def base_fields(record: Any, base: type) -> dict[str, Any]:
    """Field values of ``record`` restricted to the fields declared on ``base``.

    Used to lift a record into the next, richer record type without carrying
    over annotations from a previous pass.
    """
    return {f.name: getattr(record, f.name) for f in fields(base)}
