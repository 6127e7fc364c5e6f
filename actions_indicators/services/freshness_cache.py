"""
Stale-while-revalidate cache for per-repository workflow details.

Entries younger than ``max_age`` are served as-is. Entries older than that but
still inside ``max_age + stale_window`` are served immediately while one
background refresh replaces them. Anything older is recomputed before
returning.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, TypeVar

from actions_indicators.schemas.workflow import CacheEntry, ComposedWorkflow, RepoKey
from actions_indicators.services.cache_store import CacheStore, InMemoryCacheStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = timedelta(days=1)
DEFAULT_STALE_WINDOW = timedelta(days=10)

WorkflowMapping = Dict[str, ComposedWorkflow]
ComputeFn = Callable[[RepoKey], Awaitable[WorkflowMapping]]
T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FreshnessCache:
    """Wraps a compute function with a per-repository freshness policy."""

    def __init__(
        self,
        compute: ComputeFn,
        store: CacheStore | None = None,
        max_age: timedelta = DEFAULT_MAX_AGE,
        stale_window: timedelta = DEFAULT_STALE_WINDOW,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.compute = compute
        self.store = store if store is not None else InMemoryCacheStore()
        self.max_age = max_age
        self.stale_window = stale_window
        self.clock = clock
        self._inflight: dict[str, asyncio.Task[WorkflowMapping]] = {}

    async def get_or_compute(self, repo: RepoKey) -> WorkflowMapping:
        key = repo.cache_key
        entry = await self._store_call(self.store.get, key)
        if entry is not None:
            age = self.clock() - entry.computed_at
            if age < self.max_age:
                logger.debug("Cache hit for %s (age %s)", key, age)
                return entry.value
            if age < self.max_age + self.stale_window:
                logger.debug("Serving stale entry for %s (age %s)", key, age)
                self._revalidate_in_background(repo)
                return entry.value

        task = self._inflight.get(key)
        if task is None:
            task = self._start_refresh(repo)
        # Shared with other waiters; cancelling this caller must not cancel the refresh.
        return await asyncio.shield(task)

    def is_refreshing(self, repo: RepoKey) -> bool:
        return repo.cache_key in self._inflight

    def peek(self, repo: RepoKey) -> CacheEntry | None:
        return self.store.get(repo.cache_key)

    async def invalidate(self, repo: RepoKey) -> None:
        await self._store_call(self.store.delete, repo.cache_key)
        logger.info("Invalidated workflow details for %s", repo.cache_key)

    async def wait_idle(self) -> None:
        """Wait for all outstanding refreshes; failures are not raised."""
        if self._inflight:
            await asyncio.gather(*self._inflight.values(), return_exceptions=True)

    async def _store_call(self, method: Callable[..., T], *args: Any) -> T:
        if getattr(self.store, "blocking", False):
            return await asyncio.to_thread(method, *args)
        return method(*args)

    def _start_refresh(self, repo: RepoKey) -> asyncio.Task[WorkflowMapping]:
        key = repo.cache_key
        task = asyncio.create_task(self._refresh(repo))
        self._inflight[key] = task
        task.add_done_callback(lambda done: self._clear_inflight(key, done))
        return task

    def _clear_inflight(self, key: str, task: asyncio.Task[WorkflowMapping]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled() and task.exception() is not None:
            # Waiters may all have been cancelled; nobody else retrieves this.
            logger.debug("Refresh for %s failed: %s", key, task.exception())

    async def _refresh(self, repo: RepoKey) -> WorkflowMapping:
        value = await self.compute(repo)
        entry = CacheEntry(value=value, computed_at=self.clock())
        await self._store_call(self.store.set, repo.cache_key, entry)
        logger.info("Refreshed workflow details for %s (%s workflows)", repo.cache_key, len(value))
        return entry.value

    def _revalidate_in_background(self, repo: RepoKey) -> None:
        if repo.cache_key in self._inflight:
            return
        task = self._start_refresh(repo)
        task.add_done_callback(self._log_background_failure)

    @staticmethod
    def _log_background_failure(task: asyncio.Task[WorkflowMapping]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Background revalidation failed; keeping stale entry: %s", exc)
