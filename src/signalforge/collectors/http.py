"""Shared HTTP helpers for collectors."""

import asyncio
import functools
import re
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

import httpx

from signalforge.errors import CollectorError

P = ParamSpec("P")
R = TypeVar("R")

DEFAULT_TIMEOUT_SECONDS = 8.0
USER_AGENT = "SignalForge/0.1 (signal digest)"
SNIPPET_LIMIT = 200
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

_TAGS = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def _is_retryable(exc: httpx.RequestError | httpx.HTTPStatusError) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.TimeoutException))


def retry_with_backoff(
    retries: int = 2,
    delay: float = 0.5,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry async HTTP operations with exponential backoff for transient failures."""

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            current_delay = delay
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                    attempt += 1
                    if attempt > retries or not _is_retryable(exc):
                        raise
                    await asyncio.sleep(current_delay)
                    current_delay *= 2

        return wrapper

    return decorator


@retry_with_backoff()
async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> Any:
    """GET ``url`` and decode the JSON body, raising on HTTP errors."""
    response = await client.get(url, params=params, headers=headers)
    response.raise_for_status()
    return response.json()


def json_object(payload: Any, source: str) -> dict[str, Any]:
    """Return ``payload`` if it decoded to a JSON object, else raise CollectorError."""
    if not isinstance(payload, dict):
        raise CollectorError(source, f"expected a JSON object, got {type(payload).__name__}")
    return payload


def build_snippet(text: str | None, limit: int = SNIPPET_LIMIT) -> str:
    """Strip markup, collapse whitespace and truncate to ``limit`` characters."""
    if not text:
        return ""
    cleaned = _WHITESPACE.sub(" ", _TAGS.sub(" ", text)).strip()
    if len(cleaned) <= limit:
        return cleaned
    return f"{cleaned[: limit - 1]}…"
