"""
FastAPI Gateway Application Factory
===================================

Entry point for the gateway that sits between web clients and the internal
Mega API.

Architecture:
    Browser -> Gateway (this service) -> Internal Mega API

Routers:
    - /api/mr/comment/{id}/delete : Proxied comment deletion (requires a session)
    - /health                     : Health check endpoint

Environment Variables Required:
    - MEGA_INTERNAL_HOST: Internal API base address (e.g., "http://mega:8000")
    - SESSION_JWT_SECRET: Secret used to verify session JWTs
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn --factory mega_gateway.app.main:create_app --reload --host 0.0.0.0 --port 8080

    Production:
        uvicorn --factory mega_gateway.app.main:create_app --host 0.0.0.0 --port 8080 --workers 4
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .models import ErrorResponse, HealthResponse
from .proxy import proxy_router

SERVICE_NAME = "mega-gateway"
SERVICE_VERSION = "0.1.0"


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


class AppState:
    """
    Global application state container.

    Holds the shared HTTP client for the internal API.
    """
    def __init__(self):
        self.backend_client: Optional[httpx.AsyncClient] = None
        self.settings: Optional[Settings] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup: load settings, configure logging, open the internal API client.
    Shutdown: close the client.
    """
    settings = get_settings()
    state = app.state.app_state
    state.settings = settings

    setup_logging(settings.LOG_LEVEL)
    logger = logging.getLogger("mega_gateway.main")

    logger.info(
        "Starting gateway",
        extra={
            "internal_host": settings.MEGA_INTERNAL_HOST,
            "log_level": settings.LOG_LEVEL,
        }
    )

    # Tests may install their own client before startup.
    owns_client = state.backend_client is None
    if owns_client:
        state.backend_client = httpx.AsyncClient(
            timeout=settings.MEGA_INTERNAL_TIMEOUT_SECONDS
        )
        logger.info("Opened internal API client")

    yield

    logger.info("Shutting down gateway")

    if owns_client and state.backend_client is not None:
        await state.backend_client.aclose()
        state.backend_client = None
        logger.info("Closed internal API client")


def create_app() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS middleware
        - Route handlers
        - Exception handlers

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Mega Gateway",
        description="Session-checked proxy to the internal Mega API",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.app_state = AppState()

    origins = settings.allowed_origins_list
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    app.include_router(proxy_router, tags=["Internal API Proxy"])

    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Service status and basic metadata."""
        return HealthResponse(status="ok", service=SERVICE_NAME, version=SERVICE_VERSION)

    @app.get("/", tags=["System"])
    async def root() -> Dict[str, Any]:
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "endpoints": {
                "health": "/health",
                "docs": "/docs",
                "comment_delete": "/api/mr/comment/{id}/delete",
            }
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Internal API failures land here too: they are logged and answered
        with the same generic 500 as any other fault.
        """
        logger = logging.getLogger("mega_gateway.main")
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        body = ErrorResponse(
            error="internal_server_error",
            message="An unexpected error occurred",
            detail=str(exc) if settings.LOG_LEVEL == "DEBUG" else None,
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    return app


if __name__ == "__main__":
    settings = get_settings()

    uvicorn.run(
        "mega_gateway.app.main:create_app",
        factory=True,
        host=settings.GATEWAY_HOST,
        port=settings.GATEWAY_PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
