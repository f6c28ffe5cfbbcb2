"""Integrity scoring."""

from signalforge.integrity.score import (
    EchoRiskStats,
    IntegrityInputs,
    calculate_integrity_score,
    failed_sources,
    fetch_failed_flag,
    summarize_echo_risk,
)

__all__ = [
    "EchoRiskStats",
    "IntegrityInputs",
    "calculate_integrity_score",
    "failed_sources",
    "fetch_failed_flag",
    "summarize_echo_risk",
]
