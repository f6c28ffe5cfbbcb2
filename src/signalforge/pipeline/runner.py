"""End-to-end run: collect concurrently, process, render, record."""

import asyncio
import logging
import time
from datetime import UTC, date, datetime

from signalforge.artifacts import RunArtifactWriter
from signalforge.baseline import DEFAULT_LOOKBACK_DAYS, BaselineAnchorer
from signalforge.collectors import Collector
from signalforge.data import RawRecord, RunRequest, RunResult
from signalforge.errors import ConfigurationError, StorageError
from signalforge.ids import build_run_id
from signalforge.pipeline.core import process_signals
from signalforge.ranking import RecordScorer
from signalforge.ranking.timestamp_tier import canonical_timestamp
from signalforge.run_logger import RunLogger
from signalforge.storage import RunStore, StoredItem, StoredRun, format_timestamp
from signalforge.synthesis import build_context_block

DEFAULT_LIMIT_PER_SOURCE = 10
DEEP_MODE_MULTIPLIER = 2

logger = logging.getLogger(__name__)


class SignalPipeline:
    """Collect signals for a request and turn them into a recorded run.

    Flow:
    1. All requested collectors run in parallel
    2. Failed collectors become ``<SOURCE>_FETCH_FAILED`` flags
    3. The ranking core produces the digest (anchored against the store)
    4. The context block is rendered and artifacts are written
    5. The run is persisted idempotently

    Args:
        collectors: Collectors keyed by source name.
        store: Optional run store for baselines and persistence.
        artifact_writer: Optional writer for run files.
        run_logger: Optional RunLogger for stage logging.
        scorer: Ranking strategy (defaults to positional).
        lookback_days: Baseline lookback horizon.
        limit_per_source: Records requested per collector in quick mode
            (doubled in deep mode).
    """

    def __init__(
        self,
        collectors: dict[str, Collector],
        *,
        store: RunStore | None = None,
        artifact_writer: RunArtifactWriter | None = None,
        run_logger: RunLogger | None = None,
        scorer: RecordScorer | None = None,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        limit_per_source: int = DEFAULT_LIMIT_PER_SOURCE,
    ) -> None:
        self._collectors = collectors
        self._store = store
        self._artifact_writer = artifact_writer
        self._run_logger = run_logger
        self._scorer = scorer
        self._lookback_days = lookback_days
        self._limit = limit_per_source

    def _limit_for(self, request: RunRequest) -> int:
        if request.mode == "deep":
            return self._limit * DEEP_MODE_MULTIPLIER
        return self._limit

    async def _collect(
        self, request: RunRequest, now: datetime
    ) -> tuple[list[RawRecord], list[str], int]:
        names = list(request.sources)
        limit = self._limit_for(request)

        t0 = time.monotonic()
        tasks = [
            self._collectors[name].collect(
                request.query, window_days=request.window_days, limit=limit, now=now
            )
            for name in names
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        duration = time.monotonic() - t0

        records: list[RawRecord] = []
        failed: list[str] = []
        excluded_missing_timestamp = 0
        for name, result in zip(names, results, strict=True):
            if self._run_logger:
                self._run_logger.log_source(
                    type(self._collectors[name]).__name__, result, source=name
                )
            if isinstance(result, BaseException):
                logger.warning(f"Collector {name} raised: {str(result)}")
                failed.append(name)
                continue
            if result.failed:
                failed.append(name)
            records.extend(result.records)
            excluded_missing_timestamp += result.excluded_missing_timestamp

        if self._run_logger:
            self._run_logger.log_stage(
                stage="collect",
                component="asyncio.gather",
                input_count=len(names),
                output_count=len(records),
                duration_seconds=duration,
                detail={"failed_sources": failed},
            )

        return records, failed, excluded_missing_timestamp

    async def run(self, request: RunRequest, *, now: datetime | None = None) -> RunResult:
        """Execute a run.

        Args:
            request: The validated run request.
            now: Reference time. Defaults to the end of ``request.run_date``
                (UTC) when the request pins a date, else the current UTC time.

        Returns:
            RunResult with the digest, context block and artifact paths.

        Raises:
            ConfigurationError: If a requested source has no configured
                collector, or ``request.run_date`` disagrees with ``now``.
        """
        missing = [name for name in request.sources if name not in self._collectors]
        if missing:
            msg = f"No collector configured for source(s): {', '.join(missing)}"
            raise ConfigurationError(msg)

        run_date, now = resolve_run_clock(request, now)
        run_id = build_run_id(request, run_date)

        if self._run_logger:
            self._run_logger.start_run(run_id, request)

        try:
            result = await self._execute(request, run_id, run_date, now)
        except Exception:
            if self._run_logger:
                self._run_logger.finish_run(None)
            raise

        if self._run_logger:
            self._run_logger.finish_run(result)
        return result

    async def _execute(
        self, request: RunRequest, run_id: str, run_date: str, now: datetime
    ) -> RunResult:
        logger.info(f"Run {run_id}: collecting from {', '.join(request.sources)}")
        records, failed, excluded_missing_timestamp = await self._collect(request, now)

        anchorer = None
        if self._store is not None:
            anchorer = BaselineAnchorer(self._store, lookback_days=self._lookback_days)

        # Baseline lookups block on SQLite
        t0 = time.monotonic()
        digest = await asyncio.to_thread(
            process_signals,
            records,
            window_days=request.window_days,
            allow_t4=request.allow_t4,
            top_n=request.top_n,
            now=now,
            run_date=run_date,
            failed_sources=failed,
            excluded_missing_timestamp=excluded_missing_timestamp,
            scorer=self._scorer,
            anchorer=anchorer,
        )
        if self._run_logger:
            self._run_logger.log_stage(
                stage="ranking",
                component="process_signals",
                input_count=len(records),
                output_count=len(digest.ranked),
                duration_seconds=time.monotonic() - t0,
                detail={
                    "counts": digest.counts,
                    "timestamp_tier_counts": digest.timestamp_tier_counts,
                    "integrity_components": digest.integrity.components,
                    "echo_risk_stats": digest.integrity.echo_risk_stats,
                },
            )

        context_block_text = build_context_block(
            query=request.query,
            window_days=request.window_days,
            source_counts=digest.counts.per_source_counts,
            integrity_score=digest.integrity.total,
            flags=digest.flags,
            target=request.target,
            top_items=digest.ranked,
            anchors=digest.anchors,
        )

        result = RunResult(
            run_id=run_id,
            integrity_score=digest.integrity.total,
            flags=list(digest.flags),
            digest=digest,
            context_block_text=context_block_text,
        )

        if self._artifact_writer:
            try:
                result.artifacts = await asyncio.to_thread(
                    self._artifact_writer.write,
                    run_id,
                    request,
                    run_date,
                    digest,
                    context_block_text,
                )
            except OSError as e:
                logger.exception(f"Failed to write artifacts for run {run_id}")
                result.artifacts_error = str(e)

        if self._store is not None:
            result.storage_error = await asyncio.to_thread(
                self._persist, self._store, request, result, now
            )

        return result

    def _persist(
        self, store: RunStore, request: RunRequest, result: RunResult, now: datetime
    ) -> str | None:
        run = StoredRun(
            id=result.run_id,
            query=request.query,
            window_days=request.window_days,
            target=request.target,
            mode=request.mode,
            created_at=format_timestamp(now),
            integrity_score=result.integrity_score,
            flags=tuple(result.flags),
        )
        items = [
            StoredItem.from_record(result.run_id, item, canonical_timestamp(item.published_at))
            for item in result.digest.items
        ]
        try:
            store.insert_run(run, items)
        except StorageError as e:
            logger.exception(f"Failed to persist run {result.run_id}")
            return str(e)
        return None


def resolve_run_clock(request: RunRequest, now: datetime | None) -> tuple[str, datetime]:
    """Return the (run date, reference time) pair a run works against.

    The window filter uses the reference time and baseline cutoffs use the
    run date, so both must describe the same day.

    Raises:
        ConfigurationError: If ``request.run_date`` differs from the UTC date
            of an explicit ``now``.
    """
    if now is None:
        if request.run_date is None:
            now = datetime.now(tz=UTC)
            return (now.date().isoformat(), now)
        end_of_day = datetime.combine(
            date.fromisoformat(request.run_date), datetime.max.time(), tzinfo=UTC
        )
        return (request.run_date, end_of_day.replace(microsecond=0))

    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    now_date = now.astimezone(UTC).date().isoformat()
    if request.run_date is not None and request.run_date != now_date:
        msg = f"run_date {request.run_date} does not match the reference date {now_date}"
        raise ConfigurationError(msg)
    return (now_date, now)
