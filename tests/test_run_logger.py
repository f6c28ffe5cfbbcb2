"""Tests for RunLogger and JSON conversion helpers."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from signalforge.data import (
    CollectorResult,
    IntegrityComponents,
    RawRecord,
    RunCounts,
    RunRequest,
    RunResult,
)
from signalforge.pipeline import process_signals
from signalforge.run_logger import RunLogger, _jsonable

NOW = datetime(2024, 2, 10, 12, 0, tzinfo=UTC)


def _result(run_id: str = "2024-02-10-rust-1a2b3c4d") -> RunResult:
    records = [
        RawRecord(
            title="Rust async runtime release",
            url="https://example.com/a",
            snippet="",
            source="hn",
            published_at="2024-02-09T10:00:00Z",
        )
    ]
    digest = process_signals(
        records, window_days=7, allow_t4=True, top_n=5, now=NOW, run_date="2024-02-10"
    )
    return RunResult(
        run_id=run_id,
        integrity_score=digest.integrity.total,
        flags=list(digest.flags),
        digest=digest,
        artifacts={"run_folder": "runs/2024-02-10/rust"},
    )


class TestJsonable:
    def test_primitives_pass_through(self) -> None:
        assert _jsonable(None) is None
        assert _jsonable(42) == 42
        assert _jsonable("hello") == "hello"

    def test_tuples_become_lists(self) -> None:
        assert _jsonable((1, 2)) == [1, 2]

    def test_dataclass(self) -> None:
        result = _jsonable(RunCounts(collected=3, kept=2, per_source_counts={"hn": 2}))
        assert result["collected"] == 3
        assert result["per_source_counts"] == {"hn": 2}

    def test_request_model(self) -> None:
        result = _jsonable(RunRequest(query="rust"))
        assert result["query"] == "rust"
        assert result["window_days"] == 30

    def test_nested_dict(self) -> None:
        components = IntegrityComponents(
            timestamp=30, sources=25, independence=20, evidence=5, baseline=0
        )
        result = _jsonable({"components": components, "path": Path("/some/path")})
        assert result["components"]["sources"] == 25
        assert result["path"] == "/some/path"


class TestRunLogger:
    """Tests for RunLogger file output."""

    @pytest.fixture
    def run_logger(self, tmp_path: Path) -> RunLogger:
        return RunLogger(log_dir=tmp_path / "logs")

    def test_disabled_is_noop(self, tmp_path: Path) -> None:
        logger = RunLogger(log_dir=tmp_path, enabled=False)
        assert not logger.enabled

        logger.start_run("run-1", RunRequest(query="rust"))
        logger.log_source("HNCollector", CollectorResult(source="hn"), source="hn")
        logger.log_stage("ranking", "process_signals", 0, 0, 1.0)

        assert logger.finish_run(_result()) is None
        assert logger.last_log_path is None
        assert list(tmp_path.iterdir()) == []

    def test_records_sources_stages_and_result(self, run_logger: RunLogger) -> None:
        run_logger.start_run("2024-02-10-rust-1a2b3c4d", RunRequest(query="rust"))
        run_logger.log_source(
            "HNCollector",
            CollectorResult(
                source="hn",
                records=(RawRecord(title="t", url="https://e.com", snippet="", source="hn"),),
                strategy_used="algolia",
            ),
            source="hn",
        )
        run_logger.log_source("RedditCollector", RuntimeError("boom"), source="reddit")
        run_logger.log_stage(
            "ranking", "process_signals", 1, 1, 0.01, detail={"counts": RunCounts(kept=1)}
        )

        path = run_logger.finish_run(_result())

        assert path is not None
        assert run_logger.last_log_path == path
        data = json.loads(path.read_text())
        assert data["run_id"] == "2024-02-10-rust-1a2b3c4d"
        assert data["request"]["query"] == "rust"
        assert data["sources"][0] == {
            "source": "hn",
            "component": "HNCollector",
            "record_count": 1,
            "excluded_missing_timestamp": 0,
            "failed": False,
            "strategy_used": "algolia",
            "error": None,
        }
        assert data["sources"][1]["failed"] is True
        assert data["sources"][1]["error"] == "boom"
        assert data["stages"][0]["detail"]["counts"]["kept"] == 1
        assert data["stages"][0]["duration_seconds"] == 0.01
        assert data["collected"] == 1
        assert data["kept"] == 1
        assert data["artifacts"] == {"run_folder": "runs/2024-02-10/rust"}
        assert data["completed_at"] is not None
        assert data["aborted"] is False
        assert data["artifacts_error"] is None

    def test_aborted_run_is_still_written(self, run_logger: RunLogger) -> None:
        run_logger.start_run("run-1", RunRequest(query="rust"))
        path = run_logger.finish_run()
        assert path is not None
        data = json.loads(path.read_text())
        assert data["integrity_score"] is None
        assert data["aborted"] is True
        assert data["kept"] == 0

    def test_creates_log_dir(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "nested" / "logs"
        logger = RunLogger(log_dir=log_dir)
        logger.start_run("run-1", RunRequest(query="rust"))
        assert logger.finish_run() is not None
        assert log_dir.exists()

    def test_filename_format(self, run_logger: RunLogger) -> None:
        run_logger.start_run("run-1", RunRequest(query="rust"))
        path = run_logger.finish_run()
        assert path is not None
        assert path.name.startswith("run_run-1_")
        assert path.name.endswith(".json")
        assert ":" not in path.name

    def test_finish_closes_the_run(self, run_logger: RunLogger) -> None:
        run_logger.start_run("run-1", RunRequest(query="rust"))
        assert run_logger.finish_run() is not None
        assert run_logger.finish_run() is None

    def test_log_calls_without_start(self, run_logger: RunLogger) -> None:
        """Logging before start_run is a no-op."""
        run_logger.log_stage("ranking", "process_signals", 0, 1, 1.0)
        run_logger.log_source("HNCollector", CollectorResult(source="hn"), source="hn")
        assert run_logger.finish_run() is None
