"""Exact-duplicate clustering by URL."""

from collections.abc import Iterable

from signalforge.data import TimestampedRecord, UrlCluster, base_fields
from signalforge.ids import short_hash


def cluster_by_url(records: Iterable[TimestampedRecord]) -> list[UrlCluster]:
    """Deduplicate identical URLs and assign cluster ids.

    The first record seen for a URL wins; survivors keep the order of their
    first occurrence. URLs are compared verbatim.

    Args:
        records: Timestamp-classified records in collection order.

    Returns:
        One ``UrlCluster`` per distinct URL.
    """
    seen: dict[str, TimestampedRecord] = {}
    for record in records:
        if record.url not in seen:
            seen[record.url] = record

    return [
        UrlCluster(**base_fields(record, TimestampedRecord), cluster_id=short_hash(url))
        for url, record in seen.items()
    ]
