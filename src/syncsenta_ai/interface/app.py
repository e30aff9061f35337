"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from syncsenta_ai.infrastructure.config import Settings, get_settings
from syncsenta_ai.interface.dependencies import shutdown, startup
from syncsenta_ai.interface.error_handlers import register_error_handlers
from syncsenta_ai.interface.routes import analysis_router, tutor_router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of shared resources."""
    await startup()
    yield
    await shutdown()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and wire the FastAPI application."""
    settings = settings or get_settings()
    app = FastAPI(
        title="SyncSenta AI Service",
        version="1.0.0",
        description=(
            "AI-powered educational assistance for the Kenya education "
            "ecosystem: Mwalimu AI student tutoring plus analysis for "
            "teachers, school heads and county officers."
        ),
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(tutor_router, prefix=settings.api_prefix)
    app.include_router(analysis_router, prefix=settings.api_prefix)

    # ── Health check (simple liveness probe) ────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
