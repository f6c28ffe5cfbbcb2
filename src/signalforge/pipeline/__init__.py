"""Pipelines for signal runs."""

from signalforge.pipeline.base import Pipeline
from signalforge.pipeline.core import (
    FLAG_BASELINE_UNAVAILABLE,
    FLAG_WINDOW_FILTERED,
    process_signals,
)
from signalforge.pipeline.runner import SignalPipeline

__all__ = [
    "FLAG_BASELINE_UNAVAILABLE",
    "FLAG_WINDOW_FILTERED",
    "Pipeline",
    "SignalPipeline",
    "process_signals",
]
