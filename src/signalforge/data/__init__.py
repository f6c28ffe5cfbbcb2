"""Data models for SignalForge."""

from signalforge.data.models import (
    BaselineAnchor,
    BaselineRecord,
    ClusterHistory,
    CollectorResult,
    EchoRiskStats,
    EvidenceCategory,
    EvidenceGrade,
    IdeaClusteredRecord,
    IdeaClusterSummary,
    IntegrityComponents,
    IntegrityScore,
    RawRecord,
    RunCounts,
    RunResult,
    ScoredRecord,
    SignalDigest,
    SourceName,
    TimestampedRecord,
    TimestampTier,
    UrlCluster,
    base_fields,
)
from signalforge.data.request import COLLECTOR_NAMES, RunRequest

__all__ = [
    "COLLECTOR_NAMES",
    "BaselineAnchor",
    "BaselineRecord",
    "ClusterHistory",
    "CollectorResult",
    "EchoRiskStats",
    "EvidenceCategory",
    "EvidenceGrade",
    "IdeaClusteredRecord",
    "IdeaClusterSummary",
    "IntegrityComponents",
    "IntegrityScore",
    "RawRecord",
    "RunCounts",
    "RunRequest",
    "RunResult",
    "ScoredRecord",
    "SignalDigest",
    "SourceName",
    "TimestampedRecord",
    "TimestampTier",
    "UrlCluster",
    "base_fields",
]
