"""
Health API Routes
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from fastapi import status

from actions_indicators.config import settings
from actions_indicators.database import check_database_connection

router = APIRouter()


@router.get("/health")
async def health_check() -> JSONResponse:
    """Application and cache backend health"""
    database_ok = check_database_connection() if settings.cache_backend == "database" else None
    ok = database_ok is not False
    return JSONResponse(
        status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if ok else "degraded",
            "cache_backend": settings.cache_backend,
            "database": database_ok,
            "github_token_configured": settings.github_token is not None,
        },
    )
