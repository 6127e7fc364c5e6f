from __future__ import annotations

from datetime import datetime

from actions_indicators.schemas.workflow import ComposedWorkflow, IndicatorResult
from actions_indicators.services.cron_projector import next_occurrence


def resolve_indicators(workflow: ComposedWorkflow, now: datetime) -> IndicatorResult:
    """Derive the disabled, manual-trigger and next-run indicators for one workflow."""
    next_run = next_occurrence(workflow.schedule, now) if workflow.schedule else None
    return IndicatorResult(
        disabled=not workflow.is_enabled,
        dispatchable=workflow.manually_dispatchable,
        next_run=next_run,
    )
