"""
Health check endpoints.
"""

from fastapi import APIRouter, Request, status

from secureauth.schemas.response import HealthCheckResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthCheckResponse)
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Basic health check endpoint.

    Returns:
        Basic health status
    """
    settings = request.app.state.settings
    return HealthCheckResponse(
        status="ok",
        version=settings.APP_VERSION,
        service=settings.APP_NAME
    )


@router.get("/live", status_code=status.HTTP_204_NO_CONTENT)
async def liveness_check() -> None:
    """
    Liveness check untuk orchestrator.
    Return 204 jika service alive.
    """
    return None
