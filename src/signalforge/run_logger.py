"""Per-run JSON logs: what each collector returned and how the digest was built."""

import dataclasses
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from signalforge.data import CollectorResult, RunResult

LOG_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


class SourceOutcome(BaseModel):
    """What one collector contributed to a run."""

    source: str
    component: str
    record_count: int = 0
    excluded_missing_timestamp: int = 0
    failed: bool = False
    strategy_used: str | None = None
    error: str | None = None


class StageRecord(BaseModel):
    """Timing and record counts for one processing stage."""

    stage: str
    component: str
    input_count: int = 0
    output_count: int = 0
    detail: dict[str, Any] | None = None
    timestamp: str = ""
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    run_id: str
    request: dict[str, Any]
    started_at: str
    completed_at: str | None = None
    aborted: bool = False
    sources: list[SourceOutcome] = Field(default_factory=list)
    stages: list[StageRecord] = Field(default_factory=list)
    collected: int = 0
    kept: int = 0
    integrity_score: int | None = None
    flags: list[str] = Field(default_factory=list)
    artifacts: dict[str, str] = Field(default_factory=dict)
    storage_error: str | None = None
    artifacts_error: str | None = None


def _jsonable(obj: Any) -> Any:
    """Convert digest dataclasses, request models and paths to plain JSON values."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, dict):
        return {key: _jsonable(value) for key, value in obj.items()}
    if isinstance(obj, list | tuple):
        return [_jsonable(value) for value in obj]
    return obj


class RunLogger:
    """Collects source outcomes and stage timings, then writes one JSON file per run.

    A disabled logger accepts every call and writes nothing.

    Args:
        log_dir: Directory for the JSON files.
        enabled: Whether anything is recorded.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._record: RunRecord | None = None
        self._started: datetime | None = None
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """File written by the most recent :meth:`finish_run`, if any."""
        return self._last_log_path

    def start_run(self, run_id: str, request: Any) -> None:
        if not self._enabled:
            return
        self._started = datetime.now(tz=UTC)
        self._record = RunRecord(
            run_id=run_id,
            request=_jsonable(request),
            started_at=self._started.isoformat(),
        )

    def log_source(
        self,
        component: str,
        outcome: CollectorResult | BaseException,
        *,
        source: str,
    ) -> None:
        """Record the result (or the exception) of one collector.

        Args:
            component: Collector class name.
            outcome: The collector's result, or what it raised.
            source: Source name the collector was registered under.
        """
        if not self._enabled or self._record is None:
            return
        if isinstance(outcome, BaseException):
            entry = SourceOutcome(
                source=source, component=component, failed=True, error=str(outcome)
            )
        else:
            entry = SourceOutcome(
                source=source,
                component=component,
                record_count=len(outcome.records),
                excluded_missing_timestamp=outcome.excluded_missing_timestamp,
                failed=outcome.failed,
                strategy_used=outcome.strategy_used,
            )
        self._record.sources.append(entry)

    def log_stage(
        self,
        stage: str,
        component: str,
        input_count: int,
        output_count: int,
        duration_seconds: float,
        detail: dict[str, Any] | None = None,
    ) -> None:
        """Append a stage timing; ``detail`` may hold digest dataclasses."""
        if not self._enabled or self._record is None:
            return
        self._record.stages.append(
            StageRecord(
                stage=stage,
                component=component,
                input_count=input_count,
                output_count=output_count,
                detail=_jsonable(detail) if detail is not None else None,
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(self, result: RunResult | None = None) -> Path | None:
        """Write the run log.

        Args:
            result: The finished run. ``None`` records an aborted run with
                whatever sources and stages were logged so far.

        Returns:
            Path of the JSON file, or None when disabled or never started.
        """
        if not self._enabled or self._record is None or self._started is None:
            return None

        record = self._record
        record.completed_at = datetime.now(tz=UTC).isoformat()
        record.aborted = result is None
        if result is not None:
            record.collected = result.digest.counts.collected
            record.kept = result.digest.counts.kept
            record.integrity_score = result.integrity_score
            record.flags = list(result.flags)
            record.artifacts = dict(result.artifacts)
            record.storage_error = result.storage_error
            record.artifacts_error = result.artifacts_error

        self._log_dir.mkdir(parents=True, exist_ok=True)
        stamp = self._started.strftime(LOG_TIMESTAMP_FORMAT)
        filepath = self._log_dir / f"run_{record.run_id}_{stamp}.json"
        filepath.write_text(record.model_dump_json(indent=2))

        self._last_log_path = filepath
        self._record = None
        self._started = None
        return filepath
