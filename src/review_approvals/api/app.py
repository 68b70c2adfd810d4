"""
review_approvals.api.app

FastAPI app factory for the review approvals service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine, session factory, label types).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from review_approvals import __version__
from review_approvals.api.routers.categories import router as categories_router
from review_approvals.api.routers.changes import router as changes_router
from review_approvals.api.routers.health import router as health_router
from review_approvals.db.init_db import init_db
from review_approvals.db.session import create_engine, create_sessionmaker
from review_approvals.labels import label_types_from_settings
from review_approvals.observability.logging import configure_logging, get_logger
from review_approvals.observability.middleware import RequestContextMiddleware
from review_approvals.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, labels=[label.name for label in settings.labels])
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        app.state.label_types = label_types_from_settings(settings)
        if settings.env in ("dev", "test"):
            # Prod runs Alembic migrations instead.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Review Approvals",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(changes_router)
    app.include_router(categories_router)

    return app
