"""Select the cached CVEs relevant to an event"""

from datetime import datetime, timezone
from typing import List, Sequence

from dateutil.parser import isoparse

from ..core.models import VulnerabilityRecord


MAX_RELEVANT = 5

OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_published(value: str) -> datetime:
    """Publication timestamp as an aware UTC datetime; OLDEST when unparsable"""
    if not value:
        return OLDEST

    parsed = None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        try:
            parsed = isoparse(value)
        except (ValueError, OverflowError):
            return OLDEST

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return OLDEST


def most_recent(records: Sequence[VulnerabilityRecord],
                limit: int = MAX_RELEVANT) -> List[VulnerabilityRecord]:
    # sorted() is stable with reverse=True, so equal timestamps keep input order
    ordered = sorted(records, key=lambda record: parse_published(record.published), reverse=True)
    return ordered[:limit]


def find_relevant(records: Sequence[VulnerabilityRecord], event_text: str,
                  limit: int = MAX_RELEVANT) -> List[VulnerabilityRecord]:
    """CVEs whose vendor or product is named in ``event_text``

    Falls back to the most recently published CVEs when nothing matches.
    """
    if not records:
        return []

    text = (event_text or "").lower()
    matches = []
    for record in records:
        vendor = record.vendor.lower()
        product = record.product.lower()
        if (vendor and vendor in text) or (product and product in text):
            matches.append(record)
            if len(matches) == limit:
                break

    if not matches:
        return most_recent(records, limit)
    return matches
