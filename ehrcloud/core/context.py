"""
Application context: everything the request handlers share.

Built once at startup (FastAPI lifespan), stored on app.state.context and
released at shutdown. Handlers receive it through Depends(get_app_context)
instead of importing module-level singletons.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Request
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from ehrcloud.core.auth.permissions import PermissionTable
from ehrcloud.core.config import Settings
from ehrcloud.core.rate_limit import FixedWindowRateLimiter
from ehrcloud.database.session import create_db_engine, create_session_factory

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    permissions: PermissionTable = field(default_factory=PermissionTable)
    rate_limiter: Optional[FixedWindowRateLimiter] = None

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        engine = create_db_engine(settings)
        limiter = None
        if settings.RATE_LIMIT_ENABLED:
            limiter = FixedWindowRateLimiter(
                window_seconds=settings.rate_limit_window_seconds,
                max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            )
        logger.info(
            "Application context ready (env=%s, db=%s)",
            settings.ENVIRONMENT,
            engine.url.render_as_string(hide_password=True),
        )
        return cls(
            settings=settings,
            engine=engine,
            session_factory=create_session_factory(engine),
            rate_limiter=limiter,
        )

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
        logger.info("Application context closed")


def get_app_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context of the running application."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("Application context is not initialised (lifespan did not run)")
    return context


def get_settings_dependency(request: Request) -> Settings:
    return get_app_context(request).settings
