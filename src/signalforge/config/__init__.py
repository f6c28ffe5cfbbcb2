"""Configuration module for SignalForge."""

from signalforge.config.factory import create_collector, create_from_config, create_store
from signalforge.config.loader import get_default_config_path, load_config
from signalforge.config.models import (
    ArtifactsConfig,
    CollectorConfig,
    GitHubCollectorConfig,
    HNCollectorConfig,
    LoggingConfig,
    RedditCollectorConfig,
    RunDefaults,
    SignalForgeConfig,
    StorageConfig,
    WebCollectorConfig,
)

__all__ = [
    "ArtifactsConfig",
    "CollectorConfig",
    "GitHubCollectorConfig",
    "HNCollectorConfig",
    "LoggingConfig",
    "RedditCollectorConfig",
    "RunDefaults",
    "SignalForgeConfig",
    "StorageConfig",
    "WebCollectorConfig",
    "create_collector",
    "create_from_config",
    "create_store",
    "get_default_config_path",
    "load_config",
]
