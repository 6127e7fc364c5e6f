"""Shared API dependencies."""
from __future__ import annotations

from fastapi import Request

from actions_indicators.schemas.workflow import RepoKey
from actions_indicators.services.freshness_cache import FreshnessCache
from actions_indicators.services.indicator_service import IndicatorService


def get_indicator_service(request: Request) -> IndicatorService:
    return request.app.state.indicator_service


def get_cache(request: Request) -> FreshnessCache:
    return request.app.state.indicator_service.cache


def get_repo(owner: str, repo: str) -> RepoKey:
    return RepoKey(owner=owner, name=repo)


__all__ = ["get_indicator_service", "get_cache", "get_repo"]
