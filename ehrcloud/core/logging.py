"""Logging setup (stdlib logging) for the API process and the CLI scripts."""

import logging

from ehrcloud.core.config import Settings
from ehrcloud.core.tenant_context import RequestContextFilter

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - [tenant=%(tenant_id)s user=%(user_id)s] %(message)s"

_HANDLER_NAME = "ehrcloud"


def configure_logging(settings: Settings) -> None:
    """
    Install one stream handler on the "ehrcloud" logger.

    Idempotent: calling it again (several apps in one test run) only updates
    the level.
    """
    root = logging.getLogger("ehrcloud")
    root.setLevel(settings.LOG_LEVEL)

    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestContextFilter())
    root.addHandler(handler)

    # SQL echo goes through the engine's own logger
    if settings.DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
