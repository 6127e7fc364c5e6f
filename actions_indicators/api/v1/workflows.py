from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from actions_indicators.api.dependencies import get_cache, get_indicator_service, get_repo
from actions_indicators.schemas.workflow import ComposedWorkflow, IndicatorResult, RepoKey
from actions_indicators.services.freshness_cache import FreshnessCache
from actions_indicators.services.indicator_service import IndicatorService

router = APIRouter()


@router.get("/{owner}/{repo}/workflows", response_model=dict[str, ComposedWorkflow])
async def get_workflows(
    repo_key: RepoKey = Depends(get_repo),
    service: IndicatorService = Depends(get_indicator_service),
):
    return await service.prime(repo_key)


@router.get("/{owner}/{repo}/indicators", response_model=dict[str, IndicatorResult])
async def get_indicators(
    repo_key: RepoKey = Depends(get_repo),
    service: IndicatorService = Depends(get_indicator_service),
):
    return await service.resolve_all(repo_key)


@router.get("/{owner}/{repo}/indicators/{workflow_name}", response_model=IndicatorResult)
async def get_workflow_indicators(
    workflow_name: str,
    repo_key: RepoKey = Depends(get_repo),
    service: IndicatorService = Depends(get_indicator_service),
):
    result = await service.resolve_row(repo_key, workflow_name)
    if result is None:
        raise HTTPException(status_code=404, detail="Workflow not found")
    return result


@router.delete("/{owner}/{repo}/cache", status_code=status.HTTP_204_NO_CONTENT)
async def invalidate_cache(
    repo_key: RepoKey = Depends(get_repo),
    cache: FreshnessCache = Depends(get_cache),
) -> None:
    await cache.invalidate(repo_key)
