"""
Result cache — address-keyed store of completed analyses with a fixed TTL.

Expiry is enforced on every read, so an entry is never served past its
expiry even if the periodic sweep has not run yet. The sweep is an asyncio
task owned by the cache (start()/stop()); it only prunes memory and does no
I/O. All dict access happens under a threading.Lock with short critical
sections, so the cache can be shared by concurrent analyses and threads.
"""

from __future__ import annotations

import asyncio
import contextlib
import threading
import time
from dataclasses import dataclass
from typing import Callable

from walletrisk.analysis_engine.models import RiskAnalysis
from walletrisk.config.env import DEFAULT_CACHE_SWEEP_INTERVAL_SEC, DEFAULT_CACHE_TTL_SEC
from walletrisk.walletrisk_logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    analysis: RiskAnalysis
    expiry: float
    """Epoch seconds; the entry is valid while expiry > now."""


def cache_key(address: str) -> str:
    return address.strip().lower()


class RiskCache:
    """Process-local analysis cache with TTL and a cancellable sweep task."""

    def __init__(
        self,
        ttl_sec: float = DEFAULT_CACHE_TTL_SEC,
        sweep_interval_sec: float = DEFAULT_CACHE_SWEEP_INTERVAL_SEC,
        *,
        clock: Clock = time.time,
    ) -> None:
        """
        Args:
            ttl_sec: Lifetime of an entry after put().
            sweep_interval_sec: Seconds between expired-entry sweeps once started.
            clock: Returns current epoch seconds; injectable for tests.
        """
        if ttl_sec <= 0:
            raise ValueError("ttl_sec must be positive")
        if sweep_interval_sec <= 0:
            raise ValueError("sweep_interval_sec must be positive")
        self.ttl_sec = float(ttl_sec)
        self.sweep_interval_sec = float(sweep_interval_sec)
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._sweep_task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None

    def now(self) -> float:
        return self._clock()

    def expiry_for(self, now: float) -> float:
        return now + self.ttl_sec

    def get(self, address: str) -> RiskAnalysis | None:
        """Return the cached analysis if still valid; expired entries count as a miss."""
        key = cache_key(address)
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or entry.expiry <= self._clock():
            return None
        return entry.analysis

    def put(self, address: str, analysis: RiskAnalysis, *, now: float | None = None) -> float:
        """Insert or replace the entry for address; returns its expiry instant."""
        now = self._clock() if now is None else now
        entry = CacheEntry(analysis=analysis, expiry=self.expiry_for(now))
        with self._lock:
            self._entries[cache_key(address)] = entry
        return entry.expiry

    def sweep_expired(self) -> None:
        """Remove every entry whose expiry has passed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.expiry <= now]
            for key in expired:
                del self._entries[key]
            remaining = len(self._entries)
        logger.info("cache_sweep_done", removed=len(expired), remaining=remaining)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def start(self) -> None:
        """Schedule the periodic sweep on the running event loop. Idempotent."""
        if self.running:
            return
        stop_event = asyncio.Event()
        self._stop_event = stop_event
        self._sweep_task = asyncio.get_running_loop().create_task(self._run_sweeps(stop_event))
        logger.info("cache_sweep_started", interval_sec=self.sweep_interval_sec, ttl_sec=self.ttl_sec)

    async def stop(self) -> None:
        """Cancel the sweep task and wait for it to exit."""
        task = self._sweep_task
        if task is None:
            return
        if self._stop_event is not None:
            self._stop_event.set()
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._sweep_task = None
        self._stop_event = None
        logger.info("cache_sweep_stopped")

    async def _run_sweeps(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.sweep_interval_sec)
            except asyncio.TimeoutError:
                try:
                    self.sweep_expired()
                except Exception as e:
                    logger.exception("cache_sweep_failed", error=str(e))

    async def __aenter__(self) -> "RiskCache":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
