"""Per-source collectors."""

from signalforge.collectors.base import Collector
from signalforge.collectors.github import GitHubCollector
from signalforge.collectors.hn import HNCollector
from signalforge.collectors.reddit import RedditCollector
from signalforge.collectors.web import WebCollector

__all__ = [
    "Collector",
    "GitHubCollector",
    "HNCollector",
    "RedditCollector",
    "WebCollector",
]
