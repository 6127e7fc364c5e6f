from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from actions_indicators.config import settings
from actions_indicators.core.exceptions import TransportError

logger = logging.getLogger(__name__)


class GitHubClient:
    """GitHub REST (v3) and GraphQL (v4) client used by the workflow fetchers."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        graphql_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if token is None and settings.github_token is not None:
            token = settings.github_token.get_secret_value()
        self.api_url = (api_url or str(settings.github_api_url)).rstrip("/")
        self.graphql_url = graphql_url or str(settings.github_graphql_url)
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.client = httpx.AsyncClient(
            base_url=self.api_url,
            headers=headers,
            timeout=timeout or settings.http_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def rest_get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("GitHub GET %s failed: %s", path, exc.response.status_code)
            raise TransportError(
                f"GitHub GET {path} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("GitHub GET %s failed: %s", path, exc)
            raise TransportError(f"GitHub GET {path} failed: {exc}") from exc
        except ValueError as exc:
            raise TransportError(f"GitHub GET {path} returned invalid JSON") from exc

    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"query": query, "variables": variables or {}}
        try:
            response = await self.client.post(self.graphql_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("GitHub GraphQL query failed: %s", exc.response.status_code)
            raise TransportError(
                f"GitHub GraphQL returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("GitHub GraphQL query failed: %s", exc)
            raise TransportError(f"GitHub GraphQL failed: {exc}") from exc
        except ValueError as exc:
            raise TransportError("GitHub GraphQL returned invalid JSON") from exc

        errors = body.get("errors") or []
        if errors:
            message = "; ".join(str(err.get("message", err)) for err in errors)
            logger.error("GitHub GraphQL errors: %s", message)
            raise TransportError(f"GitHub GraphQL errors: {message}")
        return body.get("data") or {}
