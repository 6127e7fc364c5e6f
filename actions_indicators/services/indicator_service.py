"""
Per-row indicator resolution on top of the workflow details cache.
"""
from __future__ import annotations

import inspect
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Set, Union
from urllib.parse import urlsplit

from actions_indicators.core.exceptions import TransportError
from actions_indicators.schemas.workflow import ComposedWorkflow, IndicatorResult, RepoKey
from actions_indicators.services.freshness_cache import FreshnessCache, utc_now
from actions_indicators.services.indicator_resolver import resolve_indicators

logger = logging.getLogger(__name__)

RowCallback = Callable[[str, IndicatorResult], Union[None, Awaitable[None]]]


def workflow_name_from_reference(reference: str) -> str:
    """Last path segment of a row reference such as ``/owner/repo/actions/workflows/ci.yml``."""
    return urlsplit(reference).path.split("/")[-1]


class IndicatorService:
    def __init__(self, cache: FreshnessCache, clock: Callable[[], datetime] = utc_now):
        self.cache = cache
        self.clock = clock

    async def prime(self, repo: RepoKey) -> dict[str, ComposedWorkflow]:
        """Warm the cache as soon as the repository is known, before any row shows up."""
        return await self.cache.get_or_compute(repo)

    async def resolve_row(self, repo: RepoKey, reference: str) -> IndicatorResult | None:
        workflows = await self.cache.get_or_compute(repo)
        workflow = workflows.get(workflow_name_from_reference(reference))
        if workflow is None:
            return None
        return resolve_indicators(workflow, self.clock())

    async def resolve_all(self, repo: RepoKey) -> dict[str, IndicatorResult]:
        workflows = await self.cache.get_or_compute(repo)
        now = self.clock()
        return {name: resolve_indicators(wf, now) for name, wf in workflows.items()}


class WorkflowRowObserver:
    """Receives "row discovered" notifications and hands results to rendering callbacks."""

    def __init__(self, service: IndicatorService, repo: RepoKey):
        self.service = service
        self.repo = repo
        self._callbacks: List[RowCallback] = []
        self._seen: Set[str] = set()

    def register(self, callback: RowCallback) -> None:
        self._callbacks.append(callback)

    async def notify(self, reference: str) -> IndicatorResult | None:
        # A row may be reported more than once while the list re-renders.
        if reference in self._seen:
            return None
        self._seen.add(reference)

        try:
            result = await self.service.resolve_row(self.repo, reference)
        except TransportError as exc:
            logger.warning("Skipping indicators for %s in %s: %s", reference, self.repo, exc)
            self._seen.discard(reference)
            return None
        if result is None:
            return None

        for callback in self._callbacks:
            outcome = callback(reference, result)
            if inspect.isawaitable(outcome):
                await outcome
        return result
