"""Periodic CVE cache refresh task"""

import asyncio
import logging
from typing import Optional

from .cve_store import VulnerabilityStore


class CacheRefresher:
    """Runs ``store.ensure_fresh()`` at startup and then on a fixed interval

    Failures are logged and the next tick tries again. ``stop()`` cancels the
    background task, so the refresher never outlives its owner.
    """

    def __init__(self, store: VulnerabilityStore, interval: float):
        self.store = store
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_once(self) -> bool:
        """Single refresh attempt; returns False if it failed"""
        try:
            await self.store.ensure_fresh()
            return True
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logging.error(f"CVE refresh failed: {e}")
            return False

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            await self.refresh_once()

    async def start(self):
        """Refresh immediately, then schedule the periodic task"""
        if self.running:
            return
        await self.refresh_once()
        self._task = asyncio.create_task(self._run(), name="cve-cache-refresher")
        logging.info(f"CVE refresher started (every {self.interval}s)")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logging.info("CVE refresher stopped")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
