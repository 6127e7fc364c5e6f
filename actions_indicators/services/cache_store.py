"""
Storage backends for the workflow details cache.
"""
from __future__ import annotations

import logging
from datetime import timezone
from typing import Callable, Protocol

from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from actions_indicators.models import WorkflowDetailsCache
from actions_indicators.schemas.workflow import CacheEntry, ComposedWorkflow

logger = logging.getLogger(__name__)

_payload_adapter = TypeAdapter(dict[str, ComposedWorkflow])


class CacheStore(Protocol):
    blocking: bool

    def get(self, key: str) -> CacheEntry | None: ...

    def set(self, key: str, entry: CacheEntry) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryCacheStore:
    """Process-local store; hands back the same objects it was given."""

    blocking = False

    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


class DatabaseCacheStore:
    """Persists one row per repository in the workflow_details_cache table.

    Timestamps must be timezone-aware; they are stored as UTC and read back as UTC.
    """

    blocking = True

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> CacheEntry | None:
        db = self.session_factory()
        try:
            row = db.get(WorkflowDetailsCache, key)
            if row is None:
                return None
            computed_at = row.computed_at
            if computed_at.tzinfo is None:
                # SQLite drops the offset; values are always written as UTC.
                computed_at = computed_at.replace(tzinfo=timezone.utc)
            return CacheEntry(
                value=_payload_adapter.validate_json(row.payload),
                computed_at=computed_at,
            )
        finally:
            db.close()

    def set(self, key: str, entry: CacheEntry) -> None:
        if entry.computed_at.tzinfo is None:
            raise ValueError(f"computed_at for {key} must be timezone-aware")
        computed_at = entry.computed_at.astimezone(timezone.utc)
        payload = _payload_adapter.dump_json(entry.value).decode("utf-8")

        db = self.session_factory()
        try:
            row = db.get(WorkflowDetailsCache, key)
            if row is None:
                db.add(WorkflowDetailsCache(cache_key=key, payload=payload, computed_at=computed_at))
            else:
                row.payload = payload
                row.computed_at = computed_at
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
        logger.debug("Persisted %s workflows for %s", len(entry.value), key)

    def delete(self, key: str) -> None:
        db = self.session_factory()
        try:
            row = db.get(WorkflowDetailsCache, key)
            if row is not None:
                db.delete(row)
                db.commit()
        finally:
            db.close()
