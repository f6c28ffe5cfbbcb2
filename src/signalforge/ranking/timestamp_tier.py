"""Timestamp classification, window filtering and tier policy."""

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from signalforge.data import RawRecord, TimestampedRecord, TimestampTier, base_fields


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts date-only values and a trailing ``Z``. Naive values are taken as
    UTC. Returns None for missing or unparseable input.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def canonical_timestamp(value: str | None) -> str | None:
    """Render a parseable timestamp as ``YYYY-MM-DDTHH:MM:SSZ`` (None otherwise)."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.strftime("%Y-%m-%dT%H:%M:%SZ")


def assign_timestamp_tier(published_at: str | None) -> TimestampTier:
    """Classify the temporal trust of a record.

    Missing or unparseable timestamps are ``T4``; everything else is ``T1``.
    """
    if parse_timestamp(published_at) is None:
        return TimestampTier.T4
    return TimestampTier.T1


def is_within_window(published_at: str | None, window_days: int, now: datetime) -> bool:
    """Check whether a record falls inside the collection window.

    Missing or empty timestamps pass (the tier policy decides their fate
    later); unparseable non-empty timestamps fail.

    Args:
        published_at: The record's raw timestamp.
        window_days: Window size in days.
        now: Current time, injected for determinism.

    Returns:
        True if the record is kept by the window filter.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    if not published_at:
        return True
    parsed = parse_timestamp(published_at)
    if parsed is None:
        return False
    return now - parsed <= timedelta(days=window_days)


def classify(records: Iterable[RawRecord]) -> list[TimestampedRecord]:
    """Attach a timestamp tier to each record."""
    return [
        TimestampedRecord(
            **base_fields(record, RawRecord),
            timestamp_tier=assign_timestamp_tier(record.published_at),
        )
        for record in records
    ]


def filter_window(
    records: Iterable[RawRecord], window_days: int, now: datetime
) -> list[RawRecord]:
    """Keep the records that pass :func:`is_within_window`, in order."""
    return [r for r in records if is_within_window(r.published_at, window_days, now)]


def apply_tier_policy(
    records: Sequence[TimestampedRecord], *, allow_t4: bool
) -> tuple[list[TimestampedRecord], int]:
    """Drop ``T4`` records unless the caller allows them.

    Returns:
        Tuple of (kept records, number of excluded ``T4`` records).
    """
    if allow_t4:
        return list(records), 0
    kept = [r for r in records if r.timestamp_tier != TimestampTier.T4]
    return kept, len(records) - len(kept)


def count_tiers(records: Iterable[TimestampedRecord]) -> dict[str, int]:
    """Count records per tier; every tier appears, zero-filled."""
    counts = {tier.value: 0 for tier in TimestampTier}
    for record in records:
        counts[record.timestamp_tier.value] += 1
    return counts
