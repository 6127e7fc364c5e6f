"""
Actions Indicators - FastAPI Application
Workflow status indicators (disabled, manual trigger, next scheduled run) per repository
"""
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
from datetime import datetime, timezone
from functools import partial
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from actions_indicators.config import Settings, settings
from actions_indicators.core.exceptions import TransportError
from actions_indicators.integrations.github import GitHubClient
from actions_indicators.services.aggregator import compute_workflow_details
from actions_indicators.services.cache_store import CacheStore, DatabaseCacheStore, InMemoryCacheStore
from actions_indicators.services.freshness_cache import FreshnessCache
from actions_indicators.services.indicator_service import IndicatorService

from actions_indicators.api.routes import health
from actions_indicators.api.v1 import workflows

logger = logging.getLogger(__name__)


def build_cache_store(config: Settings) -> CacheStore:
    if config.cache_backend == "database":
        from actions_indicators.database import SessionLocal, init_db

        init_db()
        return DatabaseCacheStore(SessionLocal)
    return InMemoryCacheStore()


def build_indicator_service(client: GitHubClient, config: Settings) -> IndicatorService:
    cache = FreshnessCache(
        compute=partial(compute_workflow_details, client),
        store=build_cache_store(config),
        max_age=config.cache_max_age,
        stale_window=config.cache_stale_window,
    )
    return IndicatorService(cache)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("Starting Actions Indicators API...")
    client = GitHubClient()
    app.state.github_client = client
    app.state.indicator_service = build_indicator_service(client, settings)
    logger.info(
        "API running on %s environment (cache backend: %s)",
        settings.app_env,
        settings.cache_backend,
    )
    yield
    await app.state.indicator_service.cache.wait_idle()
    await client.aclose()
    logger.info("Shutting down Actions Indicators API...")


app = FastAPI(
    title=settings.app_name,
    description="Workflow status indicators for GitHub Actions",
    version="1.0.0",
    lifespan=lifespan,
)

# Respect forwarded proto/host when running behind a proxy.
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(TransportError)
async def transport_error_handler(request: Request, exc: TransportError) -> JSONResponse:
    # Indicators are best-effort; the caller renders nothing for this repository.
    logger.warning("Upstream fetch failed for %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc), "upstream_status": exc.status_code},
    )


@app.get("/")
async def root() -> dict:
    return {
        "name": settings.app_name,
        "environment": settings.app_env,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


app.include_router(health.router, prefix=settings.api_v1_prefix, tags=["Health"])
app.include_router(
    workflows.router, prefix=f"{settings.api_v1_prefix}/repos", tags=["Workflows"]
)
