"""Pipeline protocol for front ends."""

from datetime import datetime
from typing import Protocol

from signalforge.data import RunRequest, RunResult


class Pipeline(Protocol):
    """Interface for end-to-end signal runs."""

    async def run(self, request: RunRequest, *, now: datetime | None = None) -> RunResult:
        """Collect, rank, score and record signals for a request.

        Args:
            request: The validated run request.
            now: Reference time (defaults to the current UTC time).

        Returns:
            RunResult with run id, integrity score, flags and artifacts.
        """
        ...
