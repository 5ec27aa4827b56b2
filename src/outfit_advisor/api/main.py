"""FastAPI application for Outfit Advisor."""

from collections import OrderedDict
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from outfit_advisor import __version__
from outfit_advisor.config import Settings
from outfit_advisor.core.orchestrator import OutfitOrchestrator
from outfit_advisor.core.vision import VisionBackend
from outfit_advisor.logging_config import configure_logging

from .routes import analyze, sessions


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[VisionBackend] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        settings: Explicit settings; read from the environment (and .env) if omitted
        backend: Vision backend override, used by tests

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Outfit Advisor API",
        description="AI-powered outfit analysis and style recommendations",
        version=__version__,
    )
    app.state.settings = settings
    app.state.orchestrator = OutfitOrchestrator.from_settings(settings, backend=backend)
    app.state.sessions = OrderedDict()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(analyze.router, prefix="/api", tags=["Analysis"])
    app.include_router(sessions.router, prefix="/api", tags=["Sessions"])

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "Outfit Advisor API",
            "version": __version__,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "configured": settings.has_credentials,
        }

    return app


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "outfit_advisor.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
