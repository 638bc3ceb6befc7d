"""
CookSmart FastAPI Application
Main entry point: wiring, lifespan, middleware and routes
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio
from typing import Optional

import httpx

from api.routes import admin, auth, health, ingredients, pantry, preferences, profiles, recipes, saved
from app.config import Settings, settings
from app.container import build_services
from app.exceptions import BackendError, CookSmartError
from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    cooksmart_exception_handler,
    general_exception_handler,
)
from services import SessionService

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("cooksmart.main")


async def initialize_session(session: SessionService, attempts: int, delay: float) -> None:
    """
    Restore the stored session, retrying while the backend is unreachable.
    After the last failed attempt the gateway starts anonymous.
    """
    for attempt in range(1, attempts + 1):
        try:
            await session.initialize()
            _logger.info("Session initialization succeeded")
            return
        except BackendError as exc:
            _logger.warning(
                "Session init attempt %d/%d failed: %s",
                attempt,
                attempts,
                exc,
            )
            if attempt < attempts:
                await anyio.sleep(delay)

    _logger.error("Session initialization failed after %d attempts; continuing anonymous", attempts)
    session.mark_anonymous()


def create_app(
    app_settings: Settings = settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Build the services, restore the session in the background and run
        the session monitor until shutdown.
        """
        _logger.info(f"Starting CookSmart in {app_settings.environment.value} mode")
        services = build_services(app_settings, transport)
        app.state.services = services

        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(
                    initialize_session,
                    services.session,
                    app_settings.startup_attempts,
                    app_settings.startup_delay_sec,
                )
                tg.start_soon(services.session.run_monitor)
                try:
                    yield
                finally:
                    tg.cancel_scope.cancel()
        finally:
            _logger.info("Shutting down CookSmart")
            await services.aclose()

    app = FastAPI(
        title=app_settings.api_title,
        version=app_settings.app_version,
        description=app_settings.api_description,
        lifespan=lifespan,
        debug=app_settings.debug,
        openapi_url=(
            f"{app_settings.api_prefix}/openapi.json" if not app_settings.is_production() else None
        ),
        docs_url=f"{app_settings.api_prefix}/docs" if not app_settings.is_production() else None,
        redoc_url=f"{app_settings.api_prefix}/redoc" if not app_settings.is_production() else None,
    )
    app.state.settings = app_settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=app_settings.cors_allow_credentials,
        allow_methods=app_settings.cors_allow_methods,
        allow_headers=app_settings.cors_allow_headers,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(CookSmartError, cooksmart_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    for module in (health, recipes, ingredients, pantry, saved, auth, profiles, admin, preferences):
        app.include_router(module.router, prefix=app_settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
