"""Tests for configuration loading and factory functions."""

from pathlib import Path
from tempfile import NamedTemporaryFile

import pytest
from pydantic import ValidationError

from signalforge.artifacts import RunArtifactWriter
from signalforge.collectors import GitHubCollector, HNCollector, RedditCollector, WebCollector
from signalforge.config import (
    GitHubCollectorConfig,
    HNCollectorConfig,
    RedditCollectorConfig,
    SignalForgeConfig,
    StorageConfig,
    WebCollectorConfig,
    create_collector,
    create_from_config,
    create_store,
    get_default_config_path,
    load_config,
)
from signalforge.errors import ConfigurationError
from signalforge.pipeline import SignalPipeline
from signalforge.run_logger import RunLogger
from signalforge.storage import SQLiteRunStore


class TestConfigModels:
    """Tests for Pydantic config models."""

    def test_github_collector_config_defaults(self) -> None:
        config = GitHubCollectorConfig()
        assert config.type == "github"
        assert config.repo_limit == 3
        assert config.release_limit == 3

    def test_web_collector_config_defaults(self) -> None:
        config = WebCollectorConfig()
        assert config.type == "web"
        assert config.lang == "en"

    def test_root_config_defaults(self) -> None:
        config = SignalForgeConfig()
        assert [c.type for c in config.collectors] == ["reddit", "hn", "github"]
        assert config.storage.enabled is True
        assert config.storage.lookback_days == 180
        assert config.artifacts.runs_dir == "runs"
        assert config.logging.enabled is False
        assert config.run.limit_per_source == 10

    def test_unknown_collector_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SignalForgeConfig.model_validate({"collectors": [{"type": "myspace"}]})

    def test_config_is_frozen(self) -> None:
        config = StorageConfig()
        with pytest.raises(ValidationError):
            config.enabled = False  # type: ignore[misc]


class TestConfigLoader:
    """Tests for YAML config loading."""

    def test_load_config(self) -> None:
        yaml_content = """
collectors:
  - type: hn
    timeout: 3.5
  - type: github
    repo_limit: 5
storage:
  enabled: false
run:
  limit_per_source: 20
"""
        with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write(yaml_content)
            f.flush()
            config = load_config(Path(f.name))

        assert isinstance(config.collectors[0], HNCollectorConfig)
        assert config.collectors[0].timeout == 3.5
        assert isinstance(config.collectors[1], GitHubCollectorConfig)
        assert config.collectors[1].repo_limit == 5
        assert config.storage.enabled is False
        assert config.run.limit_per_source == 20

    def test_load_empty_config_uses_defaults(self) -> None:
        with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("")
            f.flush()
            config = load_config(Path(f.name))

        assert config == SignalForgeConfig()

    def test_get_default_config_path(self) -> None:
        path = get_default_config_path()
        assert path.name == "default.yaml"
        assert path.parent.name == "configs"

    def test_load_default_config(self) -> None:
        path = get_default_config_path()
        if path.exists():
            config = load_config(path)
            assert isinstance(config, SignalForgeConfig)


class TestFactoryFunctions:
    """Tests for component factory functions."""

    def test_create_collectors(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GNEWS_API_KEY", "test-key")
        assert isinstance(create_collector(RedditCollectorConfig()), RedditCollector)
        assert isinstance(create_collector(HNCollectorConfig()), HNCollector)
        assert isinstance(create_collector(GitHubCollectorConfig()), GitHubCollector)
        assert isinstance(create_collector(WebCollectorConfig(lang="it")), WebCollector)

    def test_web_collector_without_key_is_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("GNEWS_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="API key required"):
            create_collector(WebCollectorConfig())

    def test_create_store(self, tmp_path: Path) -> None:
        store = create_store(StorageConfig(db_path=str(tmp_path / "a.db")))
        assert isinstance(store, SQLiteRunStore)
        assert store.db_path == tmp_path / "a.db"
        assert create_store(StorageConfig(enabled=False)) is None

    def test_create_store_override(self, tmp_path: Path) -> None:
        store = create_store(StorageConfig(db_path="ignored.db"), str(tmp_path / "b.db"))
        assert store is not None
        assert store.db_path == tmp_path / "b.db"

    def test_create_from_config(self, tmp_path: Path) -> None:
        config = SignalForgeConfig.model_validate(
            {
                "storage": {"db_path": str(tmp_path / "runs.db")},
                "artifacts": {"runs_dir": str(tmp_path / "runs")},
            }
        )
        pipeline, run_logger = create_from_config(config)
        assert isinstance(pipeline, SignalPipeline)
        assert set(pipeline._collectors) == {"reddit", "hn", "github"}
        assert isinstance(pipeline._artifact_writer, RunArtifactWriter)
        assert run_logger is None

    def test_create_from_config_log_override(self, tmp_path: Path) -> None:
        config = SignalForgeConfig(storage=StorageConfig(enabled=False))
        _pipeline, run_logger = create_from_config(
            config, log_override=True, log_dir_override=str(tmp_path)
        )
        assert isinstance(run_logger, RunLogger)
        assert run_logger.enabled

    def test_duplicate_collectors_rejected(self) -> None:
        config = SignalForgeConfig(
            collectors=[HNCollectorConfig(), HNCollectorConfig()],
            storage=StorageConfig(enabled=False),
        )
        with pytest.raises(ConfigurationError, match="more than once"):
            create_from_config(config)
