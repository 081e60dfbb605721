"""
Per-request tenant context for logging.

The auth dependencies record the resolved tenant and user in ContextVars;
RequestContextFilter copies them onto every log record so log lines can be
attributed to a hospital.

Usage:
    app.add_middleware(RequestContextMiddleware)
"""

import logging
import time
from contextvars import ContextVar
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("ehrcloud.access")

current_tenant_id: ContextVar[Optional[int]] = ContextVar("current_tenant_id", default=None)
current_user_id: ContextVar[Optional[int]] = ContextVar("current_user_id", default=None)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Resets the context for every request and writes one access log line.

    Flow:
        1. Request arrives, context reset
        2. Dependencies resolve tenant and user, set_tenant_context() fills the vars
        3. Response leaves, access line logged with tenant and user
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        token_tenant = current_tenant_id.set(None)
        token_user = current_user_id.set(None)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            # Dependencies run in another task; request.state carries their result back
            tenant_id = getattr(request.state, "tenant_id", None)
            user_id = getattr(request.state, "user_id", None)
            current_tenant_id.set(tenant_id)
            current_user_id.set(user_id)
            logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response
        finally:
            current_tenant_id.reset(token_tenant)
            current_user_id.reset(token_user)


def get_current_tenant_id() -> Optional[int]:
    return current_tenant_id.get()


def get_current_user_id() -> Optional[int]:
    return current_user_id.get()


def set_tenant_context(tenant_id: Optional[int], user_id: Optional[int] = None) -> None:
    """
    Record the tenant (and user) of the current request or task.

    Also usable from scripts and background jobs.
    """
    current_tenant_id.set(tenant_id)
    current_user_id.set(user_id)


class RequestContextFilter(logging.Filter):
    """Adds tenant_id and user_id attributes ("-" when unknown) to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        tenant_id = current_tenant_id.get()
        user_id = current_user_id.get()
        record.tenant_id = tenant_id if tenant_id is not None else "-"
        record.user_id = user_id if user_id is not None else "-"
        return True
