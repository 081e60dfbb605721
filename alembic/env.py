"""
Alembic environment - EHR Cloud.

1. The database URL comes from ehrcloud.core.config (environment / .env)
2. Importing ehrcloud.models registers every table on Base.metadata
3. Online (connected) and offline (SQL script) migrations are supported
"""

from logging.config import fileConfig

from sqlalchemy import create_engine, pool

from alembic import context

from ehrcloud.core.config import get_settings
from ehrcloud.database.base_class import Base
import ehrcloud.models  # noqa: F401  (registers the models)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_url() -> str:
    return get_settings().DATABASE_URL


def run_migrations_offline() -> None:
    """
    Generate SQL without a connection.

    Usage:
        alembic upgrade head --sql > migration.sql
    """
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Apply migrations to the configured database.

    Usage:
        alembic upgrade head
    """
    connectable = create_engine(get_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
