from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RepoKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def cache_key(self) -> str:
        """Repository identity used as the cache key; GitHub names are case-insensitive."""
        return f"{self.owner}/{self.name}".lower()

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


class WorkflowSummary(BaseModel):
    name: str
    is_enabled: bool


class WorkflowDefinition(BaseModel):
    name: str
    raw_text: str


class WorkflowDetails(BaseModel):
    schedule: str | None = None
    manually_dispatchable: bool = False


class ComposedWorkflow(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    is_enabled: bool
    schedule: str | None = None
    manually_dispatchable: bool = False


class IndicatorResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    disabled: bool
    dispatchable: bool
    next_run: datetime | None = None


class CacheEntry(BaseModel):
    value: dict[str, ComposedWorkflow]
    computed_at: datetime
