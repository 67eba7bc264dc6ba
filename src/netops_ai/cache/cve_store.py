"""
Vulnerability store: the in-memory CVE snapshot and its JSON cache file.

The snapshot is refreshed from the NVD feed at most once per freshness
window. The cache file lets a restarted process adopt a recent snapshot
without touching the network. A failed refresh leaves the previous
snapshot in place, so readers keep getting stale-but-valid data.

Usage:
    store = VulnerabilityStore(nvd_client, config)
    await store.ensure_fresh()      # raises FeedUnavailable on feed errors
    records = store.snapshot()      # never blocks on the network
"""

import asyncio
import json
import logging
import os
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Sequence

from ..config.settings import AICoreConfig
from ..core.models import CacheSnapshot, VulnerabilityRecord


class VulnerabilityFeed(Protocol):
    async def fetch_recent(self, days: int) -> List[VulnerabilityRecord]:
        ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def filter_network_cves(records: Iterable[VulnerabilityRecord],
                        vendors: Sequence[str],
                        threshold: float) -> List[VulnerabilityRecord]:
    """Keep high-severity records from networking-equipment vendors"""
    allowed = {vendor.lower() for vendor in vendors}
    return [
        record for record in records
        if record.cvss_score >= threshold and record.vendor.lower() in allowed
    ]


class VulnerabilityStore:
    def __init__(self, feed: VulnerabilityFeed, config: AICoreConfig,
                 now: Callable[[], datetime] = _utcnow) -> None:
        self.feed = feed
        self.config = config
        self.cache_path = Path(config.cve_cache_file)
        self.freshness_window = timedelta(seconds=config.freshness_window)
        self._now = now
        self._current: Optional[CacheSnapshot] = None
        self._lock = threading.Lock()
        self._refresh_lock = asyncio.Lock()

    @property
    def last_refresh(self) -> Optional[datetime]:
        with self._lock:
            return self._current.timestamp if self._current else None

    def snapshot(self) -> List[VulnerabilityRecord]:
        """Copy of the current record list"""
        with self._lock:
            return list(self._current.records) if self._current else []

    def _is_fresh(self, snapshot: Optional[CacheSnapshot]) -> bool:
        if snapshot is None:
            return False
        return self._now() - _as_utc(snapshot.timestamp) < self.freshness_window

    def _adopt(self, snapshot: CacheSnapshot) -> bool:
        """Swap in ``snapshot`` unless it is older than the current one"""
        with self._lock:
            if self._current and _as_utc(snapshot.timestamp) < _as_utc(self._current.timestamp):
                logging.debug("Ignoring snapshot older than the one in memory")
                return False
            self._current = snapshot
            return True

    async def ensure_fresh(self) -> None:
        """Load or fetch CVEs so the in-memory snapshot is within the freshness window"""
        async with self._refresh_lock:
            with self._lock:
                current = self._current
            if self._is_fresh(current):
                logging.debug("In-memory CVE snapshot is fresh")
                return

            cached = self.load()
            if self._is_fresh(cached):
                self._adopt(cached)
                logging.info(f"Loaded {len(cached.records)} CVEs from cache file {self.cache_path}")
                return

            logging.info("Fetching fresh CVEs from NVD")
            items = await self.feed.fetch_recent(self.config.fetch_window_days)

            filtered = filter_network_cves(items, self.config.vendor_allowlist,
                                           self.config.severity_threshold)
            if not filtered:
                logging.warning("No network CVEs found - using all CVEs")
                filtered = items

            timestamp = self._now()
            if current and _as_utc(current.timestamp) > timestamp:
                timestamp = _as_utc(current.timestamp)

            snapshot = CacheSnapshot(timestamp=timestamp, records=list(filtered))
            self.save(snapshot)
            self._adopt(snapshot)
            logging.info(f"Stored {len(snapshot.records)} CVEs")

    def load(self) -> Optional[CacheSnapshot]:
        """Read the cache file; a missing or corrupt file is a cache miss"""
        try:
            with open(self.cache_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return CacheSnapshot.from_dict(data)
        except FileNotFoundError:
            logging.debug(f"No CVE cache file at {self.cache_path}")
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logging.warning(f"Ignoring unreadable CVE cache file {self.cache_path}: {e}")
        return None

    def save(self, snapshot: CacheSnapshot) -> None:
        """Replace the cache file with ``snapshot``"""
        tmp_path = self.cache_path.with_name(self.cache_path.name + '.tmp')
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(snapshot.to_dict(), f, indent=2)
            os.replace(tmp_path, self.cache_path)
        except OSError as e:
            logging.error(f"Failed to write CVE cache file {self.cache_path}: {e}")
