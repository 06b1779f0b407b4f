"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cyberpulse.api.v1.router import api_router
from cyberpulse.config import Settings, get_settings
from cyberpulse.container import Container, build_container
from cyberpulse.core.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, container: Container | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    A prebuilt ``container`` is used as is (tests pass one with fake
    remotes); otherwise one is built from ``settings`` at startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager for startup/shutdown events."""
        setup_logging(settings.log_level, debug=settings.debug)
        logger.info("Starting %s in %s mode", settings.app_name, settings.environment)

        app.state.container = container or build_container(settings)
        await app.state.container.start()

        yield

        logger.info("Shutting down...")
        await app.state.container.close()

    app = FastAPI(
        title=settings.app_name,
        description="Offline-first cybersecurity news, breach, CVE and event sync",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    return app


app = create_app()
