"""SignalForge: ranked, integrity-scored digests of recent public signals."""

from signalforge.artifacts import RunArtifact, RunArtifactWriter
from signalforge.baseline import BaselineAnchorer, BaselineSource
from signalforge.collectors import (
    Collector,
    GitHubCollector,
    HNCollector,
    RedditCollector,
    WebCollector,
)
from signalforge.config import SignalForgeConfig, create_from_config, load_config
from signalforge.data import (
    BaselineAnchor,
    BaselineRecord,
    ClusterHistory,
    CollectorResult,
    EvidenceGrade,
    IdeaClusteredRecord,
    IdeaClusterSummary,
    IntegrityComponents,
    IntegrityScore,
    RawRecord,
    RunCounts,
    RunRequest,
    RunResult,
    ScoredRecord,
    SignalDigest,
    SourceName,
    TimestampTier,
    UrlCluster,
)
from signalforge.errors import (
    CollectorError,
    ConfigurationError,
    SignalForgeError,
    StorageError,
)
from signalforge.ids import build_run_id, short_hash, slugify
from signalforge.integrity import IntegrityInputs, calculate_integrity_score
from signalforge.pipeline import Pipeline, SignalPipeline, process_signals
from signalforge.ranking import PositionalScorer, RecordScorer, cluster_by_url, cluster_ideas
from signalforge.run_logger import RunLogger
from signalforge.storage import RunStore, SQLiteRunStore
from signalforge.synthesis import build_context_block
from signalforge.url import extract_host

__all__ = [
    # Models
    "BaselineAnchor",
    "BaselineRecord",
    "ClusterHistory",
    "CollectorResult",
    "EvidenceGrade",
    "IdeaClusterSummary",
    "IdeaClusteredRecord",
    "IntegrityComponents",
    "IntegrityScore",
    "RawRecord",
    "RunCounts",
    "RunRequest",
    "RunResult",
    "ScoredRecord",
    "SignalDigest",
    "SourceName",
    "TimestampTier",
    "UrlCluster",
    # Errors
    "CollectorError",
    "ConfigurationError",
    "SignalForgeError",
    "StorageError",
    # Functions
    "build_context_block",
    "build_run_id",
    "calculate_integrity_score",
    "cluster_by_url",
    "cluster_ideas",
    "extract_host",
    "process_signals",
    "short_hash",
    "slugify",
    # Protocols
    "BaselineSource",
    "Collector",
    "Pipeline",
    "RecordScorer",
    "RunStore",
    # Collectors
    "GitHubCollector",
    "HNCollector",
    "RedditCollector",
    "WebCollector",
    # Ranking
    "BaselineAnchorer",
    "IntegrityInputs",
    "PositionalScorer",
    # Pipelines
    "SignalPipeline",
    # Storage and artifacts
    "RunArtifact",
    "RunArtifactWriter",
    "SQLiteRunStore",
    # Logging
    "RunLogger",
    # Config
    "SignalForgeConfig",
    "create_from_config",
    "load_config",
]
