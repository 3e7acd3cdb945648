"""
Health check endpoints for the HR Connect access service.

Provides /health (liveness) and /ready (readiness) endpoints.
"""

from fastapi import APIRouter, Response, status

from hrconnect.logging_config import get_logger
from hrconnect.mapping import get_repository_or_none
from hrconnect.mapping.repository import LoadState

router = APIRouter(tags=["health"])
logger = get_logger(__name__)


@router.get("/health", status_code=status.HTTP_200_OK)
async def health() -> dict[str, str]:
    """Liveness check endpoint."""
    return {"status": "healthy"}


@router.get("/ready", status_code=status.HTTP_200_OK)
async def ready(response: Response) -> dict[str, str | bool]:
    """Readiness check endpoint.

    Ready once the mapping load has settled. A failed load still serves
    the fallback roles, so it is reported as degraded rather than not ready.
    """
    repository = get_repository_or_none()
    if repository is None or repository.state == LoadState.LOADING:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "not ready", "mapping": LoadState.LOADING.value, "degraded": False}

    degraded = repository.state == LoadState.FAILED
    if degraded:
        logger.warning("Serving in degraded mode", mapping=repository.state.value)
    return {"status": "ready", "mapping": repository.state.value, "degraded": degraded}
