"""Factory functions to create components from configuration."""

from pathlib import Path

from signalforge.artifacts import RunArtifactWriter
from signalforge.collectors import (
    Collector,
    GitHubCollector,
    HNCollector,
    RedditCollector,
    WebCollector,
)
from signalforge.config.models import (
    CollectorConfig,
    GitHubCollectorConfig,
    HNCollectorConfig,
    RedditCollectorConfig,
    SignalForgeConfig,
    StorageConfig,
    WebCollectorConfig,
)
from signalforge.errors import ConfigurationError
from signalforge.pipeline import SignalPipeline
from signalforge.run_logger import RunLogger
from signalforge.storage import SQLiteRunStore


def create_collector(config: CollectorConfig) -> Collector:
    """Create a collector from config.

    Uses explicit type matching rather than getattr.

    Raises:
        ConfigurationError: If the config type is unknown or the collector
            cannot be constructed (e.g. a missing API key).
    """
    if isinstance(config, RedditCollectorConfig):
        return RedditCollector(timeout=config.timeout)
    if isinstance(config, HNCollectorConfig):
        return HNCollector(timeout=config.timeout)
    if isinstance(config, GitHubCollectorConfig):
        return GitHubCollector(
            repo_limit=config.repo_limit,
            release_limit=config.release_limit,
            timeout=config.timeout,
        )
    if isinstance(config, WebCollectorConfig):
        try:
            return WebCollector(lang=config.lang, timeout=config.timeout)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
    msg = f"Unknown collector config type: {type(config)}"
    raise ConfigurationError(msg)


def create_store(
    config: StorageConfig, db_path_override: str | None = None
) -> SQLiteRunStore | None:
    """Create the run store, or None when storage is disabled."""
    if not config.enabled:
        return None
    return SQLiteRunStore(db_path_override or config.db_path)


def create_from_config(
    config: SignalForgeConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
    db_path_override: str | None = None,
) -> tuple[SignalPipeline, RunLogger | None]:
    """Create a complete pipeline from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.
        db_path_override: Override the config's storage.db_path setting.

    Returns:
        Tuple of (pipeline, run_logger).
        run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    collectors: dict[str, Collector] = {}
    for collector_config in config.collectors:
        if collector_config.type in collectors:
            msg = f"Collector {collector_config.type!r} configured more than once"
            raise ConfigurationError(msg)
        collectors[collector_config.type] = create_collector(collector_config)

    artifact_writer = None
    if config.artifacts.enabled:
        artifact_writer = RunArtifactWriter(Path(config.artifacts.runs_dir))

    pipeline = SignalPipeline(
        collectors,
        store=create_store(config.storage, db_path_override),
        artifact_writer=artifact_writer,
        run_logger=run_logger,
        lookback_days=config.storage.lookback_days,
        limit_per_source=config.run.limit_per_source,
    )
    return (pipeline, run_logger)
