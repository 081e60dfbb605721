"""
SQLAlchemy engine and session factory construction, plus the tenant filter.

Nothing here is a module-level singleton: the AppContext owns the engine
and the session factory for the lifetime of the application.
"""
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import ORMExecuteState, Session, sessionmaker, with_loader_criteria
from sqlalchemy.pool import StaticPool

from ehrcloud.core.config import Settings
from ehrcloud.models.mixins import TenantScopedMixin

logger = logging.getLogger(__name__)

TENANT_INFO_KEY = "tenant_id"

# Execution option that lets platform code read across tenants on a scoped session
SKIP_TENANT_FILTER = "skip_tenant_filter"


# === 1. ENGINE ===

def create_db_engine(settings: Settings) -> Engine:
    """
    Build the engine for settings.DATABASE_URL.

    SQLite (tests, local demos) gets a single shared connection when the
    database lives in memory; anything else gets a pre-pinged QueuePool.
    """
    url = settings.DATABASE_URL

    if settings.is_sqlite:
        options = {
            "echo": settings.DB_ECHO,
            "connect_args": {"check_same_thread": False},
        }
        if url == "sqlite://" or ":memory:" in url:
            options["poolclass"] = StaticPool
        engine = create_engine(url, **options)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=30,
        pool_recycle=1800,        # recycle connections after 30 min
        pool_pre_ping=True,
        echo=settings.DB_ECHO,
    )


# === 2. SESSION FACTORY ===

def create_session_factory(engine: Engine) -> sessionmaker:
    factory = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    install_tenant_filter(factory)
    return factory


# === 3. TENANT FILTER ===
#
# Services always filter on tenant_id explicitly. As a second line, a
# session that has been scoped to a tenant adds the same criterion to every
# ORM SELECT touching a TenantScopedMixin model, including eager loads.

def install_tenant_filter(target) -> None:
    """Attach the tenant criteria hook to a sessionmaker or a Session."""
    event.listen(target, "do_orm_execute", _add_tenant_criteria)


def _add_tenant_criteria(execute_state: ORMExecuteState) -> None:
    tenant_id = execute_state.session.info.get(TENANT_INFO_KEY)
    if tenant_id is None:
        return
    if (
        not execute_state.is_select
        or execute_state.is_column_load
        or execute_state.is_relationship_load
        or execute_state.execution_options.get(SKIP_TENANT_FILTER, False)
    ):
        return

    execute_state.statement = execute_state.statement.options(
        with_loader_criteria(
            TenantScopedMixin,
            lambda cls: cls.tenant_id == tenant_id,
            include_aliases=True,
        )
    )


def scope_session_to_tenant(db: Session, tenant_id: Optional[int]) -> None:
    """Restrict every later ORM SELECT on this session to one tenant."""
    if tenant_id is None:
        db.info.pop(TENANT_INFO_KEY, None)
    else:
        db.info[TENANT_INFO_KEY] = tenant_id


def session_tenant_id(db: Session) -> Optional[int]:
    return db.info.get(TENANT_INFO_KEY)


# === 4. OUT-OF-REQUEST USAGE ===

@contextmanager
def db_session(factory: sessionmaker, tenant_id: Optional[int] = None) -> Generator[Session, None, None]:
    """
    Session for scripts and maintenance tasks: commit on success, rollback
    on error, always closed.

    Usage:
        with db_session(context.session_factory) as db:
            db.add(plan)
    """
    db = factory()
    scope_session_to_tenant(db, tenant_id)
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_database_connection(engine: Engine) -> bool:
    """
    Run SELECT 1 against the database.

    Returns:
        True when the database answers, False otherwise (the error is logged)
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False
