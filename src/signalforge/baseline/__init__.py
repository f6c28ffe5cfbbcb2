"""Baseline anchoring against historical runs."""

from signalforge.baseline.anchors import (
    DEFAULT_LOOKBACK_DAYS,
    BaselineAnchorer,
    order_baselines,
    select_baselines,
)
from signalforge.baseline.base import BaselineSource

__all__ = [
    "DEFAULT_LOOKBACK_DAYS",
    "BaselineAnchorer",
    "BaselineSource",
    "order_baselines",
    "select_baselines",
]
