"""Validated run request accepted at the front-end boundary."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator

COLLECTOR_NAMES: tuple[str, ...] = ("reddit", "hn", "github", "web")
DEFAULT_WINDOW_DAYS = 30
DEFAULT_SOURCES: tuple[str, ...] = ("reddit", "hn", "github")


class RunRequest(BaseModel):
    """Options for a single pipeline run.

    Invalid requests (empty query, out-of-range window, unknown source names)
    are rejected here with a ``pydantic.ValidationError`` before any
    collector or pipeline stage runs.
    """

    query: str = Field(min_length=1)
    window_days: int = Field(default=DEFAULT_WINDOW_DAYS, ge=1, le=365)
    target: Literal["gpt", "codex"] = "gpt"
    mode: Literal["quick", "deep"] = "quick"
    sources: list[str] = Field(default_factory=lambda: list(DEFAULT_SOURCES))
    top_n: int = Field(default=10, ge=1, le=100)
    allow_t4: bool = True
    run_date: str | None = None
    deterministic: bool = True

    model_config = {"frozen": True}

    @field_validator("query")
    @classmethod
    def query_must_have_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("query must not be blank")
        return v

    @field_validator("sources")
    @classmethod
    def sources_must_be_known(cls, v: list[str]) -> list[str]:
        unknown = sorted(set(v) - set(COLLECTOR_NAMES))
        if unknown:
            raise ValueError(f"Unknown source(s): {', '.join(unknown)}")
        if not v:
            raise ValueError("at least one source is required")
        # Deduplicate while keeping the caller's order
        return list(dict.fromkeys(v))

    @field_validator("run_date")
    @classmethod
    def run_date_must_be_iso(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            date.fromisoformat(v)
        except ValueError as e:
            raise ValueError(f"run_date must be YYYY-MM-DD, got {v!r}") from e
        if len(v) != 10:
            raise ValueError(f"run_date must be YYYY-MM-DD, got {v!r}")
        return v
