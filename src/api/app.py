"""FastAPI application factory for the token analysis API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from config.settings import settings
from src.api.dependencies import limiter
from src.api.middleware import SecurityHeadersMiddleware
from src.parsers.analyzer import TokenAnalyzer


def create_app(analyzer: TokenAnalyzer | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    An injected analyzer is used as-is and left open on shutdown;
    otherwise one is built from settings and closed with the app.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = analyzer is None
        app.state.analyzer = analyzer or TokenAnalyzer.from_settings()
        try:
            yield
        finally:
            if owned:
                await app.state.analyzer.close()

    app = FastAPI(
        title="Token Safety Analyzer API",
        version="0.1.0",
        docs_url="/api/docs" if settings.api_debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_middleware(SecurityHeadersMiddleware)

    # CORS for a local UI dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    from src.api.routers.analysis import router as analysis_router
    from src.api.routers.health import router as health_router

    app.include_router(health_router)
    app.include_router(analysis_router)
    return app
