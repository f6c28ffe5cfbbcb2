"""SQLite-backed run store."""

import logging
import os
import sqlite3
from collections.abc import Iterator
from contextlib import closing, contextmanager
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

from signalforge.data import BaselineRecord, ClusterHistory
from signalforge.errors import StorageError
from signalforge.storage.base import StoredItem, StoredRun

logger = logging.getLogger(__name__)

DB_PATH_ENV_VAR = "SIGNALFORGE_DB_PATH"
DEFAULT_DB_PATH = Path("cache") / "signalforge.db"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

SCHEMA = """
CREATE TABLE IF NOT EXISTS runs (
  id TEXT PRIMARY KEY,
  query TEXT NOT NULL,
  window_days INTEGER NOT NULL,
  target TEXT NOT NULL,
  mode TEXT NOT NULL,
  created_at TEXT NOT NULL,
  integrity_score INTEGER NOT NULL,
  flags TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS items (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  run_id TEXT NOT NULL,
  title TEXT NOT NULL,
  url TEXT NOT NULL,
  snippet TEXT NOT NULL,
  published_at TEXT,
  source TEXT NOT NULL,
  cluster_id TEXT NOT NULL,
  timestamp_tier TEXT NOT NULL,
  FOREIGN KEY (run_id) REFERENCES runs(id)
);
"""

# Columns added after the first schema; applied to older databases on open
_ITEM_COLUMN_ADDITIONS: tuple[tuple[str, str], ...] = (
    ("idea_cluster_id", "TEXT"),
    ("evidence_grade", "TEXT"),
    ("origin_count", "INTEGER"),
    ("engagement", "INTEGER"),
)

_INSERT_RUN = (
    "INSERT OR IGNORE INTO runs "
    "(id, query, window_days, target, mode, created_at, integrity_score, flags) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
)

_INSERT_ITEM = (
    "INSERT INTO items "
    "(run_id, title, url, snippet, published_at, source, cluster_id, idea_cluster_id, "
    "evidence_grade, origin_count, engagement, timestamp_tier) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
)

_SELECT_BASELINE = """
SELECT items.title, items.url, items.published_at, items.source,
       items.evidence_grade, items.origin_count, items.engagement
FROM items
INNER JOIN runs ON runs.id = items.run_id
WHERE items.idea_cluster_id = ?
  AND items.published_at IS NOT NULL
  AND items.published_at < ?
  AND runs.created_at >= ?
ORDER BY items.published_at DESC
"""

_SELECT_HISTORY = """
SELECT MIN(COALESCE(items.published_at, runs.created_at)) AS first_seen,
       MAX(COALESCE(items.published_at, runs.created_at)) AS last_seen,
       COUNT(*) AS seen_count
FROM items
INNER JOIN runs ON runs.id = items.run_id
WHERE items.idea_cluster_id = ?
  AND COALESCE(items.published_at, runs.created_at) >= ?
  AND COALESCE(items.published_at, runs.created_at) <= ?
"""


def format_timestamp(value: datetime) -> str:
    """Render a datetime in the canonical UTC form used by stored rows."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def _day_start(run_date: str) -> datetime:
    return datetime.combine(date.fromisoformat(run_date), datetime.min.time(), tzinfo=UTC)


def baseline_cutoffs(run_date: str, window_days: int, lookback_days: int) -> tuple[str, str]:
    """Return (published-before cutoff, run-created-after cutoff) for a run date."""
    start = _day_start(run_date)
    return (
        format_timestamp(start - timedelta(days=window_days)),
        format_timestamp(start - timedelta(days=lookback_days)),
    )


def resolve_db_path(path: Path | str | None = None) -> Path:
    """Explicit path, else ``SIGNALFORGE_DB_PATH``, else ``cache/signalforge.db``."""
    if path is not None:
        return Path(path)
    env_path = os.environ.get(DB_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_DB_PATH


class SQLiteRunStore:
    """Persist runs and items in SQLite and serve baseline lookups.

    A connection is opened per operation, so one store can be shared across
    threads and event-loop tasks. The schema is created (and older databases
    migrated) on first use.

    Args:
        db_path: Database file (see :func:`resolve_db_path`).
    """

    def __init__(self, db_path: Path | str | None = None) -> None:
        self._db_path = resolve_db_path(db_path)
        self._initialized = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(sqlite3.connect(self._db_path)) as con:
                con.row_factory = sqlite3.Row
                con.execute("PRAGMA foreign_keys=ON;")
                if not self._initialized:
                    self._ensure_schema(con)
                    self._initialized = True
                yield con
        except sqlite3.Error as e:
            raise StorageError(f"SQLite error on {self._db_path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot open run store at {self._db_path}: {e}") from e

    @staticmethod
    def _ensure_schema(con: sqlite3.Connection) -> None:
        con.executescript(SCHEMA)
        existing = {row["name"] for row in con.execute("PRAGMA table_info(items)")}
        for name, column_type in _ITEM_COLUMN_ADDITIONS:
            if name not in existing:
                con.execute(f"ALTER TABLE items ADD COLUMN {name} {column_type}")
        con.execute(
            "CREATE INDEX IF NOT EXISTS idx_items_idea_cluster ON items (idea_cluster_id)"
        )
        con.commit()

    def insert_run(self, run: StoredRun, items: list[StoredItem]) -> bool:
        """Persist the run metadata and its items in one transaction.

        Re-submitting an already recorded run id is a no-op.

        Returns:
            True if the run was written, False if it already existed.

        Raises:
            StorageError: On any database failure (nothing is written).
        """
        with self._connect() as con, con:
            cursor = con.execute(
                _INSERT_RUN,
                (
                    run.id,
                    run.query,
                    run.window_days,
                    run.target,
                    run.mode,
                    run.created_at,
                    run.integrity_score,
                    ",".join(run.flags),
                ),
            )
            if cursor.rowcount == 0:
                logger.info(f"Run {run.id} already recorded; skipping insert")
                return False
            con.executemany(
                _INSERT_ITEM,
                [
                    (
                        item.run_id,
                        item.title,
                        item.url,
                        item.snippet,
                        item.published_at,
                        item.source,
                        item.cluster_id,
                        item.idea_cluster_id,
                        item.evidence_grade,
                        item.origin_count,
                        item.engagement,
                        item.timestamp_tier,
                    )
                    for item in items
                ],
            )
        logger.info(f"Recorded run {run.id} with {len(items)} items")
        return True

    def fetch_baseline_records(
        self,
        idea_cluster_id: str,
        run_date: str,
        window_days: int,
        lookback_days: int,
    ) -> list[BaselineRecord]:
        """Historical records of an idea cluster published before the window.

        Args:
            idea_cluster_id: Idea cluster to look up.
            run_date: Current run date (``YYYY-MM-DD``).
            window_days: Current window; records must predate its start.
            lookback_days: Containing runs must be created within this horizon.

        Returns:
            Matching records, newest first. Final ordering is the anchorer's job.
        """
        published_before, created_after = baseline_cutoffs(run_date, window_days, lookback_days)
        with self._connect() as con:
            rows = con.execute(
                _SELECT_BASELINE, (idea_cluster_id, published_before, created_after)
            ).fetchall()
        return [
            BaselineRecord(
                title=row["title"],
                url=row["url"],
                published_at=row["published_at"],
                source=row["source"],
                evidence_grade=row["evidence_grade"] or "",
                origin_count=row["origin_count"] or 0,
                engagement=row["engagement"],
            )
            for row in rows
        ]

    def get_cluster_history(
        self,
        idea_cluster_id: str,
        run_date: str,
        lookback_days: int,
    ) -> ClusterHistory:
        """First/last sighting and sighting count within the lookback horizon."""
        start = _day_start(run_date)
        lower = format_timestamp(start - timedelta(days=lookback_days))
        upper = format_timestamp(start + timedelta(days=1) - timedelta(seconds=1))
        with self._connect() as con:
            row = con.execute(_SELECT_HISTORY, (idea_cluster_id, lower, upper)).fetchone()
        if row is None:
            return ClusterHistory()
        return ClusterHistory(
            first_seen=row["first_seen"],
            last_seen=row["last_seen"],
            seen_count=row["seen_count"] or 0,
        )

    def run_exists(self, run_id: str) -> bool:
        with self._connect() as con:
            row = con.execute("SELECT 1 FROM runs WHERE id = ?", (run_id,)).fetchone()
        return row is not None

    def count_items(self, run_id: str) -> int:
        with self._connect() as con:
            row = con.execute("SELECT COUNT(*) FROM items WHERE run_id = ?", (run_id,)).fetchone()
        return int(row[0])
