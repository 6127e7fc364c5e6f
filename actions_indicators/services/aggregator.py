"""
Join the workflow list with the workflow files and derive per-workflow details.
"""
from __future__ import annotations

import asyncio
import logging
import re
from typing import Iterable, Mapping

from actions_indicators.integrations.github import GitHubClient
from actions_indicators.schemas.workflow import (
    ComposedWorkflow,
    RepoKey,
    WorkflowDetails,
    WorkflowSummary,
)
from actions_indicators.services.workflow_definitions import fetch_definitions
from actions_indicators.services.workflow_list import fetch_workflow_list

logger = logging.getLogger(__name__)

CRON_PATTERN = re.compile(r"""schedule[:\s-]+cron[:\s'"]+([^'"\n]+)""", re.IGNORECASE | re.MULTILINE)
DISPATCH_MARKER = "workflow_dispatch:"


def extract_details(raw_text: str) -> WorkflowDetails:
    match = CRON_PATTERN.search(raw_text)
    schedule = match.group(1).rstrip() if match else None
    return WorkflowDetails(
        schedule=schedule or None,
        manually_dispatchable=DISPATCH_MARKER in raw_text,
    )


def aggregate(
    summaries: Iterable[WorkflowSummary],
    definitions: Mapping[str, str],
) -> dict[str, ComposedWorkflow]:
    """
    Intersect summaries and definitions by filename.

    Summaries decide which workflows exist, definitions decide schedule and
    dispatchability. A summary without a definition file is dropped.
    """
    composed: dict[str, ComposedWorkflow] = {}
    for summary in summaries:
        raw_text = definitions.get(summary.name)
        if raw_text is None:
            # Workflow file removed or renamed since the list was captured.
            logger.debug("No definition for workflow %r; dropping", summary.name)
            continue

        details = extract_details(raw_text)
        composed[summary.name] = ComposedWorkflow(
            name=summary.name,
            is_enabled=summary.is_enabled,
            schedule=details.schedule,
            manually_dispatchable=details.manually_dispatchable,
        )
    return composed


async def compute_workflow_details(client: GitHubClient, repo: RepoKey) -> dict[str, ComposedWorkflow]:
    """Fetch both sources concurrently; either failing fails the whole computation."""
    summaries, definitions = await asyncio.gather(
        fetch_workflow_list(client, repo),
        fetch_definitions(client, repo),
    )
    composed = aggregate(summaries, definitions)
    logger.info(
        "Aggregated %s of %s workflows for %s",
        len(composed),
        len(summaries),
        repo,
    )
    return composed
