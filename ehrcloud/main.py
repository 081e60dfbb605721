"""
EHR Cloud - FastAPI application.

create_app() builds an application around an AppContext. In production the
context is created by the lifespan from the environment; tests build their
own context and pass it in.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ehrcloud import __version__
from ehrcloud.api.v1.router import api_router
from ehrcloud.core.config import Settings, get_settings
from ehrcloud.core.context import AppContext
from ehrcloud.core.exceptions import register_exception_handlers
from ehrcloud.core.logging import configure_logging
from ehrcloud.core.rate_limit import RateLimitMiddleware
from ehrcloud.core.tenant_context import RequestContextMiddleware
from ehrcloud.database.init_db import create_all_tables, seed_database
from ehrcloud.database.session import db_session

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """
    Args:
        settings: defaults to the context settings, then to the environment
        context: prebuilt context; when given, the caller owns its lifecycle
    """
    if settings is None:
        settings = context.settings if context is not None else get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = context is None
        app_context = AppContext.build(settings) if owned else context

        if settings.DB_CREATE_ALL:
            create_all_tables(app_context.engine)
            with db_session(app_context.session_factory) as db:
                seed_database(db, settings)

        app.state.context = app_context
        logger.info("%s %s started (%s)", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
        try:
            yield
        finally:
            if owned:
                app_context.close()
            logger.info("%s stopped", settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-tenant electronic health record API for hospitals",
        version=settings.APP_VERSION or __version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: context reset, then rate limit, then CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/", tags=["System"])
    async def root():
        return {
            "success": True,
            "data": {
                "app": settings.APP_NAME,
                "status": "running",
                "environment": settings.ENVIRONMENT,
            },
        }

    @app.get("/health", tags=["System"])
    async def health_check():
        return {"success": True, "data": {"status": "healthy"}}

    return app


app = create_app()
