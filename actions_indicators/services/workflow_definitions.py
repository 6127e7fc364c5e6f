from __future__ import annotations

import logging
from typing import Any

from actions_indicators.integrations.github import GitHubClient
from actions_indicators.schemas.workflow import RepoKey, WorkflowDefinition

logger = logging.getLogger(__name__)

WORKFLOWS_DIRECTORY = ".github/workflows"

WORKFLOW_FILES_QUERY = """
query($owner: String!, $name: String!, $expression: String!) {
  repository(owner: $owner, name: $name) {
    workflowFiles: object(expression: $expression) {
      ... on Tree {
        entries {
          name
          type
          object {
            ... on Blob {
              text
            }
          }
        }
      }
    }
  }
}
"""


def definitions_from_entries(entries: list[dict[str, Any]]) -> list[WorkflowDefinition]:
    """Keep plain files only; subdirectories, submodules and binary blobs carry no text."""
    definitions: list[WorkflowDefinition] = []
    for entry in entries:
        if entry.get("type") != "blob":
            continue
        text = (entry.get("object") or {}).get("text")
        if text is None:
            continue
        name = entry.get("name")
        if not name:
            continue
        definitions.append(WorkflowDefinition(name=str(name), raw_text=text))
    return definitions


async def fetch_definitions(client: GitHubClient, repo: RepoKey) -> dict[str, str]:
    """Return the raw text of every file directly under .github/workflows at HEAD, keyed by filename."""
    data = await client.graphql(
        WORKFLOW_FILES_QUERY,
        {
            "owner": repo.owner,
            "name": repo.name,
            "expression": f"HEAD:{WORKFLOWS_DIRECTORY}",
        },
    )
    tree = (data.get("repository") or {}).get("workflowFiles") or {}
    definitions = definitions_from_entries(tree.get("entries") or [])
    logger.debug("Fetched %s workflow definitions for %s", len(definitions), repo)
    return {d.name: d.raw_text for d in definitions}
