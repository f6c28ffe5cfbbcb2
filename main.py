#!/usr/bin/env python
"""CLI for the SignalForge signal ranking pipeline."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, ValidationError, field_validator

from signalforge.config import create_from_config, get_default_config_path, load_config
from signalforge.data import COLLECTOR_NAMES, RunRequest
from signalforge.errors import SignalForgeError

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    config: Path
    log: bool = False
    log_dir: str = "logs"
    db_path: str | None = None

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


async def run(args: CLIArgs, request: RunRequest) -> None:
    """Execute the pipeline with the given configuration.

    Args:
        args: Validated CLI arguments.
        request: Validated run request.
    """
    config = load_config(args.config)
    pipeline, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
        db_path_override=args.db_path,
    )

    logger.info(f"Running pipeline for: {request.query}")
    logger.info(f"Config: {args.config}")

    result = await pipeline.run(request)
    digest = result.digest

    print(f"\n{result.context_block_text}\n")

    logger.info("--- Integrity ---")
    logger.info(f"Run id: {result.run_id}")
    logger.info(f"Score: {result.integrity_score}/100")
    components = digest.integrity.components
    logger.info(
        f"Components: timestamp={components.timestamp:.1f} sources={components.sources:.1f} "
        f"independence={components.independence:.1f} evidence={components.evidence:.1f} "
        f"baseline={components.baseline:.1f}"
    )
    logger.info(f"Flags: {', '.join(result.flags) or 'none'}")
    counts = digest.counts
    logger.info(
        f"Collected {counts.collected}, kept {counts.kept} "
        f"(window -{counts.excluded_window}, T4 -{counts.excluded_t4})"
    )
    if result.artifacts:
        logger.info(f"Artifacts: {result.artifacts['run_folder']}")
    if result.artifacts_error:
        logger.warning(f"Artifacts not written: {result.artifacts_error}")
    if result.storage_error:
        logger.warning(f"Run not persisted: {result.storage_error}")

    if run_logger and run_logger.last_log_path:
        logger.info(f"Run log written to: {run_logger.last_log_path}")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Rank and integrity-score recent signals on a topic.")
    parser.add_argument(
        "query",
        help="Topic to research",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--window-days",
        type=int,
        default=30,
        help="Collection window in days (default: 30)",
    )
    parser.add_argument(
        "--sources",
        nargs="+",
        choices=COLLECTOR_NAMES,
        default=None,
        help="Sources to collect from (default: reddit hn github)",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=10,
        help="Number of ranked records to surface (default: 10)",
    )
    parser.add_argument(
        "--target",
        choices=("gpt", "codex"),
        default="gpt",
        help="Prompt pack target (default: gpt)",
    )
    parser.add_argument(
        "--mode",
        choices=("quick", "deep"),
        default="quick",
        help="Collection depth (default: quick)",
    )
    parser.add_argument(
        "--allow-t4",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Keep records without a usable timestamp (default: on)",
    )
    parser.add_argument(
        "--db-path",
        type=str,
        default=None,
        help="SQLite run store path (overrides config)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable per-stage pipeline logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            config=config_path,
            log=ns.log,
            log_dir=ns.log_dir,
            db_path=ns.db_path,
        )
        request_options = {
            "query": ns.query,
            "window_days": ns.window_days,
            "top_n": ns.top_n,
            "target": ns.target,
            "mode": ns.mode,
            "allow_t4": ns.allow_t4,
        }
        if ns.sources:
            request_options["sources"] = ns.sources
        request = RunRequest.model_validate(request_options)
    except ValidationError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args, request))
    except SignalForgeError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
