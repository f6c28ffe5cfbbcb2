"""Tests for timestamp tiering, window filtering and tier policy."""

from datetime import UTC, datetime

from signalforge.data import RawRecord, TimestampTier
from signalforge.ranking.timestamp_tier import (
    apply_tier_policy,
    assign_timestamp_tier,
    canonical_timestamp,
    classify,
    count_tiers,
    filter_window,
    is_within_window,
    parse_timestamp,
)

NOW = datetime(2024, 2, 10, 12, 0, tzinfo=UTC)


def _record(published_at: str | None, url: str = "https://example.com/a") -> RawRecord:
    return RawRecord(title="t", url=url, snippet="", source="reddit", published_at=published_at)


# -- parse_timestamp --


def test_parse_accepts_zulu_suffix() -> None:
    parsed = parse_timestamp("2024-02-09T10:00:00Z")
    assert parsed == datetime(2024, 2, 9, 10, 0, tzinfo=UTC)


def test_parse_accepts_date_only() -> None:
    assert parse_timestamp("2024-02-09") == datetime(2024, 2, 9, tzinfo=UTC)


def test_parse_converts_offsets_to_utc() -> None:
    parsed = parse_timestamp("2024-02-09T12:00:00+02:00")
    assert parsed == datetime(2024, 2, 9, 10, 0, tzinfo=UTC)


def test_parse_rejects_garbage() -> None:
    assert parse_timestamp("not a date") is None
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None


def test_canonical_timestamp() -> None:
    assert canonical_timestamp("2024-02-09T12:00:00+02:00") == "2024-02-09T10:00:00Z"
    assert canonical_timestamp("yesterday") is None


# -- assign_timestamp_tier --


def test_valid_timestamp_is_t1() -> None:
    assert assign_timestamp_tier("2024-02-09T10:00:00Z") == TimestampTier.T1


def test_missing_or_bad_timestamp_is_t4() -> None:
    assert assign_timestamp_tier(None) == TimestampTier.T4
    assert assign_timestamp_tier("last tuesday") == TimestampTier.T4


# -- is_within_window --


def test_missing_timestamp_passes_window() -> None:
    assert is_within_window(None, 7, NOW) is True


def test_empty_timestamp_is_missing_for_window_and_tier() -> None:
    assert is_within_window("", 7, NOW) is True
    assert assign_timestamp_tier("") == TimestampTier.T4
    kept = filter_window([_record("")], 7, NOW)
    assert [r.timestamp_tier for r in classify(kept)] == [TimestampTier.T4]


def test_unparseable_timestamp_fails_window() -> None:
    assert is_within_window("garbage", 7, NOW) is False


def test_window_boundary_is_inclusive() -> None:
    assert is_within_window("2024-02-03T12:00:00Z", 7, NOW) is True
    assert is_within_window("2024-02-03T11:59:59Z", 7, NOW) is False


def test_naive_now_is_treated_as_utc() -> None:
    naive_now = datetime(2024, 2, 10, 12, 0)
    assert is_within_window("2024-02-09T00:00:00Z", 7, naive_now) is True


# -- filtering and policy --


def test_filter_window_keeps_order() -> None:
    records = [
        _record("2024-02-09T00:00:00Z", "https://a"),
        _record("2023-12-01T00:00:00Z", "https://b"),
        _record(None, "https://c"),
    ]
    kept = filter_window(records, 7, NOW)
    assert [r.url for r in kept] == ["https://a", "https://c"]


def test_apply_tier_policy_excludes_t4_when_disallowed() -> None:
    classified = classify([_record("2024-02-09"), _record(None), _record("nope")])
    kept, excluded = apply_tier_policy(classified, allow_t4=False)
    assert len(kept) == 1
    assert excluded == 2


def test_apply_tier_policy_keeps_all_when_allowed() -> None:
    classified = classify([_record("2024-02-09"), _record(None)])
    kept, excluded = apply_tier_policy(classified, allow_t4=True)
    assert len(kept) == 2
    assert excluded == 0


def test_count_tiers_zero_fills() -> None:
    counts = count_tiers(classify([_record("2024-02-09"), _record(None)]))
    assert counts == {"T1": 1, "T2": 0, "T3": 0, "T4": 1}


def test_classify_preserves_fields() -> None:
    record = RawRecord(
        title="Title",
        url="https://example.com",
        snippet="s",
        source="hn",
        published_at="2024-02-09",
        engagement=12,
    )
    [classified] = classify([record])
    assert classified.title == "Title"
    assert classified.engagement == 12
    assert classified.timestamp_tier == TimestampTier.T1
