"""Per-region schedule cache whose entries expire at shift boundaries.

All state lives on the event loop thread. Only the population path and the
expiry timer callback write to the entry map; readers get copies.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from types import MappingProxyType
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from farmaguardia.config import local_now, local_tz
from farmaguardia.engine.resolve import next_shift_boundary
from farmaguardia.model.pharmacy import PharmacySchedule
from farmaguardia.model.regions import Region
from farmaguardia.parsing.base import ParseReport
from farmaguardia.parsing.registry import StrategyRegistry

from .documents import DocumentSource, DocumentUnavailableError

LOGGER = logging.getLogger(__name__)

Loader = Callable[[Region], Awaitable[List[PharmacySchedule]]]


class ScheduleLoader:
    """Acquire a region's document off-loop, then parse it on the loop."""

    def __init__(self, source: DocumentSource, registry: StrategyRegistry) -> None:
        self.source = source
        self.registry = registry
        self.reports: Dict[str, ParseReport] = {}

    async def __call__(self, region: Region) -> List[PharmacySchedule]:
        try:
            path = await asyncio.to_thread(self.source.effective_document, region)
        except DocumentUnavailableError:
            LOGGER.exception("[%s] calendar unavailable", region.id)
            return []

        strategy = self.registry.strategy_for(region)
        report = ParseReport(region.id)
        schedules = strategy.parse(path, report)
        self.reports[region.id] = report
        return schedules


class ScheduleCache:
    def __init__(
        self,
        loader: Loader,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._loader = loader
        self._clock = clock or local_now
        self._explicit_loop = loop
        self._entries: Dict[str, Tuple[PharmacySchedule, ...]] = {}
        self._pending: Dict[str, asyncio.Task] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}

    @property
    def _loop(self) -> asyncio.AbstractEventLoop:
        return self._explicit_loop or asyncio.get_running_loop()

    async def get(self, region: Region) -> List[PharmacySchedule]:
        """Return the cached schedules, loading them on a miss."""

        cached = self._entries.get(region.id)
        if cached is not None:
            return list(cached)
        return await self._load(region)

    async def force_refresh(self, region: Region) -> List[PharmacySchedule]:
        """Reload ``region``; a failed or empty reload keeps the previous data."""

        previous = self._entries.get(region.id)
        try:
            fresh = await self._load(region)
        except asyncio.CancelledError:
            raise
        except Exception:
            if previous is None:
                raise
            LOGGER.exception("[%s] refresh failed; serving previous schedules", region.id)
            return list(previous)
        if not fresh and previous is not None:
            LOGGER.warning("[%s] refresh produced no schedules; serving previous", region.id)
            return list(previous)
        return fresh

    def invalidate(self, region: Region) -> None:
        self._entries.pop(region.id, None)
        self._cancel_timer(region.id)
        LOGGER.info("[%s] cache invalidated", region.id)

    def snapshot(self) -> Mapping[str, Tuple[PharmacySchedule, ...]]:
        """Read-only copy of the current entries for resolution."""

        return MappingProxyType(dict(self._entries))

    async def close(self) -> None:
        for region_id in list(self._timers):
            self._cancel_timer(region_id)
        pending = list(self._pending.values())
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._pending.clear()
        self._entries.clear()

    async def _load(self, region: Region) -> List[PharmacySchedule]:
        task = self._pending.get(region.id)
        if task is None:
            task = self._loop.create_task(self._populate(region))
            self._pending[region.id] = task
            task.add_done_callback(lambda done, key=region.id: self._forget(key, done))
        # Shielded so one cancelled caller does not cancel the shared load.
        return list(await asyncio.shield(task))

    def _forget(self, region_id: str, task: asyncio.Task) -> None:
        if self._pending.get(region_id) is task:
            del self._pending[region_id]

    async def _populate(self, region: Region) -> List[PharmacySchedule]:
        schedules = await self._loader(region)
        if not schedules:
            LOGGER.warning("[%s] load produced no schedules; not cached", region.id)
            return []
        self._entries[region.id] = tuple(schedules)
        self._schedule_expiry(region.id)
        LOGGER.info("[%s] cached %s schedules", region.id, len(schedules))
        return list(schedules)

    def _schedule_expiry(self, region_id: str) -> None:
        self._cancel_timer(region_id)
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=local_tz())
        boundary = next_shift_boundary(now)
        delay = max((boundary - now).total_seconds(), 0.0)
        self._timers[region_id] = self._loop.call_later(delay, self._expire, region_id)
        LOGGER.debug("[%s] expires at %s (in %.0fs)", region_id, boundary.isoformat(), delay)

    def _expire(self, region_id: str) -> None:
        self._timers.pop(region_id, None)
        if self._entries.pop(region_id, None) is not None:
            LOGGER.info("[%s] cache entry expired at shift boundary", region_id)

    def _cancel_timer(self, region_id: str) -> None:
        handle = self._timers.pop(region_id, None)
        if handle is not None:
            handle.cancel()


__all__ = ["Loader", "ScheduleLoader", "ScheduleCache"]
