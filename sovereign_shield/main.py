"""FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sovereign_shield import __version__
from sovereign_shield.core.config import get_settings
from sovereign_shield.core.logging import configure_logging
from sovereign_shield.engine import ShieldPoller
from sovereign_shield.shield import get_engine, router as shield_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting %s...", settings.app_name)
    logger.info("Compliance API: %s", settings.api_base_url or "in-memory sources")

    poller = None
    if settings.enable_poller:
        engine = app.dependency_overrides.get(get_engine, get_engine)()
        poller = ShieldPoller(engine, interval=settings.poll_interval_seconds)
        poller.start()
        logger.info("Polling every %.1fs", settings.poll_interval_seconds)

    yield

    # Shutdown
    if poller is not None:
        poller.stop(timeout=settings.request_timeout_seconds)
    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Transfer compliance classification and review queue reconciliation (GDPR Art. 44-49)",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware - configurable via CORS_ORIGINS env var
    cors_origins_str = os.getenv("CORS_ORIGINS", "*")
    cors_origins = cors_origins_str.split(",") if cors_origins_str != "*" else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(shield_router)  # /shield

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "endpoints": {
                "metrics": "/shield/metrics - Rolling-window compliance metrics",
                "attention": "/shield/attention - Transfers requiring attention",
                "reconcile": "/shield/reconcile - Run one evaluation cycle",
                "sources": "/shield/sources - External source connectivity",
                "countries": "/shield/countries/{code} - Destination classification",
                "resolve": "/shield/resolve?name= - Country name resolution",
                "severity": "/shield/severity - Evidence event severity",
            },
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
