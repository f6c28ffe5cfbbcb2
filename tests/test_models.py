"""Tests for data models and the run request."""

import dataclasses

import pytest
from pydantic import ValidationError

from signalforge.data import (
    IdeaClusteredRecord,
    IntegrityComponents,
    RawRecord,
    RunRequest,
    ScoredRecord,
    TimestampedRecord,
    TimestampTier,
    UrlCluster,
    base_fields,
)

# -- record hierarchy --


def test_raw_record_defaults() -> None:
    record = RawRecord(title="t", url="https://example.com", snippet="", source="hn")
    assert record.published_at is None
    assert record.engagement is None


def test_records_are_frozen() -> None:
    record = RawRecord(title="t", url="https://example.com", snippet="", source="hn")
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.title = "changed"  # type: ignore[misc]


def test_hierarchy() -> None:
    scored = ScoredRecord(title="t", url="u", snippet="", source="hn", score=1.0)
    assert isinstance(scored, IdeaClusteredRecord)
    assert isinstance(scored, UrlCluster)
    assert isinstance(scored, TimestampedRecord)
    assert isinstance(scored, RawRecord)


def test_base_fields_restricts_to_base() -> None:
    record = UrlCluster(
        title="t",
        url="u",
        snippet="s",
        source="hn",
        timestamp_tier=TimestampTier.T1,
        cluster_id="abc",
    )
    assert base_fields(record, TimestampedRecord) == {
        "title": "t",
        "url": "u",
        "snippet": "s",
        "source": "hn",
        "published_at": None,
        "engagement": None,
        "timestamp_tier": TimestampTier.T1,
    }


def test_integrity_components_total() -> None:
    components = IntegrityComponents(
        timestamp=30, sources=25, independence=20, evidence=5.5, baseline=0
    )
    assert components.total == pytest.approx(80.5)


# -- RunRequest --


def test_run_request_defaults() -> None:
    request = RunRequest(query="rust")
    assert request.window_days == 30
    assert request.target == "gpt"
    assert request.mode == "quick"
    assert request.sources == ["reddit", "hn", "github"]
    assert request.top_n == 10
    assert request.allow_t4 is True
    assert request.deterministic is True


@pytest.mark.parametrize(
    "options",
    [
        {"query": ""},
        {"query": "   "},
        {"query": "rust", "window_days": 0},
        {"query": "rust", "window_days": 366},
        {"query": "rust", "top_n": 0},
        {"query": "rust", "sources": ["myspace"]},
        {"query": "rust", "sources": []},
        {"query": "rust", "target": "claude"},
        {"query": "rust", "mode": "slow"},
        {"query": "rust", "run_date": "10/02/2024"},
        {"query": "rust", "run_date": "2024-2-1"},
    ],
)
def test_run_request_rejects_invalid(options: dict) -> None:
    with pytest.raises(ValidationError):
        RunRequest(**options)


def test_run_request_dedupes_sources() -> None:
    request = RunRequest(query="rust", sources=["hn", "reddit", "hn"])
    assert request.sources == ["hn", "reddit"]


def test_run_request_is_frozen() -> None:
    request = RunRequest(query="rust")
    with pytest.raises(ValidationError):
        request.query = "other"  # type: ignore[misc]
