from __future__ import annotations

import logging
from typing import Any

from actions_indicators.integrations.github import GitHubClient
from actions_indicators.schemas.workflow import RepoKey, WorkflowSummary

logger = logging.getLogger(__name__)

PER_PAGE = 100


def summary_from_payload(workflow: dict[str, Any]) -> WorkflowSummary:
    # The list endpoint is not reliable: some paths are '' and deleted workflows still report 'active'.
    path = workflow.get("path")
    path = "" if path is None else str(path)
    return WorkflowSummary(
        name=path.split("/")[-1],
        is_enabled=workflow.get("state") == "active",
    )


async def fetch_workflow_list(client: GitHubClient, repo: RepoKey) -> list[WorkflowSummary]:
    """Return every configured workflow of ``repo`` with its enabled state."""
    summaries: list[WorkflowSummary] = []
    page = 1
    while True:
        body = await client.rest_get(
            f"/repos/{repo.owner}/{repo.name}/actions/workflows",
            params={"per_page": PER_PAGE, "page": page},
        )
        workflows = body.get("workflows") or []
        summaries.extend(summary_from_payload(w) for w in workflows)
        total = int(body.get("total_count") or 0)
        if not workflows or len(summaries) >= total:
            break
        page += 1

    logger.debug("Fetched %s workflow summaries for %s", len(summaries), repo)
    return summaries
