"""Pydantic configuration models for SignalForge components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from signalforge.baseline import DEFAULT_LOOKBACK_DAYS

# ============================================================
# Collector Configs
# ============================================================


class RedditCollectorConfig(BaseModel):
    """Configuration for RedditCollector."""

    type: Literal["reddit"] = "reddit"
    timeout: float = 8.0

    model_config = {"frozen": True}


class HNCollectorConfig(BaseModel):
    """Configuration for HNCollector."""

    type: Literal["hn"] = "hn"
    timeout: float = 8.0

    model_config = {"frozen": True}


class GitHubCollectorConfig(BaseModel):
    """Configuration for GitHubCollector (token read from GITHUB_TOKEN)."""

    type: Literal["github"] = "github"
    repo_limit: int = Field(default=3, ge=1, le=10)
    release_limit: int = Field(default=3, ge=1, le=10)
    timeout: float = 8.0

    model_config = {"frozen": True}


class WebCollectorConfig(BaseModel):
    """Configuration for the GNews-backed WebCollector."""

    type: Literal["web"] = "web"
    lang: str = "en"
    timeout: float = 8.0

    model_config = {"frozen": True}


CollectorConfig = Annotated[
    RedditCollectorConfig | HNCollectorConfig | GitHubCollectorConfig | WebCollectorConfig,
    Field(discriminator="type"),
]


# ============================================================
# Storage Configs
# ============================================================


class StorageConfig(BaseModel):
    """Run store settings.

    ``db_path`` falls back to SIGNALFORGE_DB_PATH, then ``cache/signalforge.db``.
    """

    enabled: bool = True
    db_path: str | None = None
    lookback_days: int = Field(default=DEFAULT_LOOKBACK_DAYS, ge=1)

    model_config = {"frozen": True}


class ArtifactsConfig(BaseModel):
    """Per-run artifact files."""

    enabled: bool = True
    runs_dir: str = "runs"

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for per-stage pipeline logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class RunDefaults(BaseModel):
    """Defaults applied to requests that leave options unset."""

    limit_per_source: int = Field(default=10, ge=1, le=100)

    model_config = {"frozen": True}


class SignalForgeConfig(BaseModel):
    """Root configuration for SignalForge."""

    collectors: list[CollectorConfig] = Field(
        default_factory=lambda: [
            RedditCollectorConfig(),
            HNCollectorConfig(),
            GitHubCollectorConfig(),
        ]
    )
    storage: StorageConfig = Field(default_factory=StorageConfig)
    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    run: RunDefaults = Field(default_factory=RunDefaults)

    model_config = {"frozen": True}
