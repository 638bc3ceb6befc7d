"""Health check routes"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_services, get_settings
from api.responses import HealthResponse
from app.config import Settings
from app.container import Services
from app.exceptions import BackendError

router = APIRouter(tags=["Health"])
logger = logging.getLogger("cooksmart.api.health")


@router.get("/health-check", response_model=HealthResponse)
async def health_check(app_settings: Settings = Depends(get_settings)):
    """Basic health check endpoint"""
    return HealthResponse(
        status="ok", service=app_settings.app_name, version=app_settings.app_version
    )


@router.get("/health/backend")
async def backend_health(
    services: Services = Depends(get_services),
    app_settings: Settings = Depends(get_settings),
):
    """One short probe query against the hosted backend."""
    try:
        await services.profiles.probe(app_settings.probe_timeout_sec)
        backend = "ok"
    except BackendError as exc:
        logger.warning(f"Backend probe failed: {exc}")
        backend = "unreachable" if exc.is_transient else "error"
    return {
        "backend": backend,
        "client_generation": services.provider.generation,
        "session_ready": services.session.is_ready,
    }
