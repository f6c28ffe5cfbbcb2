"""Per-run artifact files: context block, summary, sources and run record."""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from signalforge.data import RunRequest, SignalDigest
from signalforge.ids import slugify

DEFAULT_RUNS_DIR = Path("runs")

logger = logging.getLogger(__name__)


class RunArtifact(BaseModel):
    """Machine-readable record of a run, written as ``run_<suffix>.json``."""

    run_id: str
    run_date: str
    options: dict[str, Any]
    integrity_score: int
    integrity_components: dict[str, float]
    echo_risk_stats: dict[str, float]
    flags: list[str]
    counts: dict[str, Any]
    timestamp_tier_counts: dict[str, int]
    clusters: list[dict[str, Any]] = []
    anchors: list[dict[str, Any]] = []


def run_suffix(run_id: str) -> str:
    """Trailing hash segment of a run id, used to tell same-day runs apart."""
    return run_id.rsplit("-", 1)[-1]


def _summary_markdown(request: RunRequest, digest: SignalDigest) -> str:
    counts = digest.counts
    flags = ", ".join(digest.flags) or "none"
    return (
        "# SignalForge Run\n\n"
        f"Query: {request.query}\n"
        f"Mode: {request.mode}\n"
        f"Target: {request.target}\n"
        f"Integrity: {digest.integrity.total}/100\n"
        f"Flags: {flags}\n\n"
        "## Counts\n\n"
        f"- collected: {counts.collected}\n"
        f"- kept: {counts.kept}\n"
        f"- excluded_window: {counts.excluded_window}\n"
        f"- excluded_t4: {counts.excluded_t4}\n"
        f"- excluded_missing_timestamp: {counts.excluded_missing_timestamp}\n"
    )


class RunArtifactWriter:
    """Write the files of a run under ``<runs_dir>/<run_date>/<query slug>/``.

    Args:
        runs_dir: Root directory for run folders.
    """

    def __init__(self, runs_dir: Path = DEFAULT_RUNS_DIR) -> None:
        self._runs_dir = runs_dir

    def write(
        self,
        run_id: str,
        request: RunRequest,
        run_date: str,
        digest: SignalDigest,
        context_block_text: str,
    ) -> dict[str, str]:
        """Write all artifacts for a run.

        Args:
            run_id: The run identifier.
            request: The run request (recorded as options).
            run_date: Run date as ``YYYY-MM-DD``.
            digest: The computed digest.
            context_block_text: Rendered context block.

        Returns:
            Mapping of artifact name to file path (plus ``run_folder``).
        """
        folder = self._runs_dir / run_date / slugify(request.query)
        folder.mkdir(parents=True, exist_ok=True)
        suffix = run_suffix(run_id)

        paths = {
            "context_block": folder / f"context_block_{suffix}.txt",
            "summary": folder / f"summary_{suffix}.md",
            "sources": folder / f"sources_{suffix}.json",
            "run": folder / f"run_{suffix}.json",
        }

        artifact = RunArtifact(
            run_id=run_id,
            run_date=run_date,
            options=request.model_dump(),
            integrity_score=digest.integrity.total,
            integrity_components=dataclasses.asdict(digest.integrity.components),
            echo_risk_stats=dataclasses.asdict(digest.integrity.echo_risk_stats),
            flags=list(digest.flags),
            counts=dataclasses.asdict(digest.counts),
            timestamp_tier_counts=dict(digest.timestamp_tier_counts),
            clusters=[dataclasses.asdict(c) for c in digest.clusters],
            anchors=[dataclasses.asdict(a) for a in digest.anchors],
        )

        paths["context_block"].write_text(context_block_text, encoding="utf-8")
        paths["summary"].write_text(_summary_markdown(request, digest), encoding="utf-8")
        paths["sources"].write_text(
            json.dumps([dataclasses.asdict(r) for r in digest.ranked], indent=2),
            encoding="utf-8",
        )
        paths["run"].write_text(artifact.model_dump_json(indent=2), encoding="utf-8")

        logger.info(f"Artifacts written to {folder}")
        return {"run_folder": str(folder), **{name: str(path) for name, path in paths.items()}}
