"""
Print workflow indicators for one repository using the configured GitHub token.

Usage:
  python scripts/show_indicators.py OWNER REPO
"""
from __future__ import annotations

import asyncio
import sys

from actions_indicators.integrations.github import GitHubClient
from actions_indicators.main import build_indicator_service
from actions_indicators.config import settings
from actions_indicators.schemas.workflow import RepoKey


async def main(owner: str, name: str) -> None:
    repo = RepoKey(owner=owner, name=name)
    async with GitHubClient() as client:
        service = build_indicator_service(client, settings)
        results = await service.resolve_all(repo)
        await service.cache.wait_idle()

    if not results:
        print(f"{repo}: no workflows")
        return
    for workflow_name, result in sorted(results.items()):
        flags = []
        if result.disabled:
            flags.append("disabled")
        if result.dispatchable:
            flags.append("manual")
        next_run = result.next_run.isoformat() if result.next_run else "-"
        print(f"{workflow_name:40} {','.join(flags) or '-':18} next_run={next_run}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__.strip())
        sys.exit(2)
    asyncio.run(main(sys.argv[1], sys.argv[2]))
