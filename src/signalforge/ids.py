"""Deterministic identifiers: content hashes, slugs and run ids."""

import hashlib
import json
import re
import secrets

from signalforge.data import RunRequest

HASH_LENGTH = 10
RUN_HASH_LENGTH = 8
SLUG_MAX_LENGTH = 40

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")


def short_hash(value: str, length: int = HASH_LENGTH) -> str:
    """Return a fixed-width hex identifier for ``value``.

    SHA-256 truncated to ``length`` hex characters. Used for URL cluster,
    idea cluster and origin ids.
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:length]


def slugify(value: str) -> str:
    """Turn free text into a filesystem-friendly slug (max 40 chars)."""
    slug = _NON_ALNUM.sub("-", value.lower()).strip("-")
    return slug[:SLUG_MAX_LENGTH].strip("-") or "run"


def normalize_query(query: str) -> str:
    return _WHITESPACE.sub(" ", query.strip()).lower()


def normalized_run_options(request: RunRequest, run_date: str) -> dict[str, object]:
    """Canonical view of the options that identify a run."""
    return {
        "query": normalize_query(request.query),
        "window_days": request.window_days,
        "target": request.target,
        "mode": request.mode,
        "sources": sorted(request.sources),
        "top_n": request.top_n,
        "run_date": run_date,
    }


def build_run_id(request: RunRequest, run_date: str, *, nonce: str | None = None) -> str:
    """Build the run identifier for a request on a given date.

    Identical requests on the same day produce identical ids. Requests with
    ``deterministic=False`` mix in a random nonce unless one is supplied.

    Args:
        request: The validated run request.
        run_date: Run date as ``YYYY-MM-DD``.
        nonce: Explicit nonce to mix in (generated when the request is
            nondeterministic and none is given).

    Returns:
        ``"<run_date>-<query slug>-<options hash>"``.
    """
    payload = json.dumps(normalized_run_options(request, run_date), sort_keys=True)
    if nonce is None and not request.deterministic:
        nonce = secrets.token_hex(3)
    if nonce:
        payload = f"{payload}|{nonce}"
    return f"{run_date}-{slugify(request.query)}-{short_hash(payload, RUN_HASH_LENGTH)}"
