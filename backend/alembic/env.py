"""Alembic environment for the documents table of the database store."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from userlink.config import get_settings
from userlink.db.base import Base
from userlink.db import models  # noqa: F401 - registers Document on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_url() -> str:
    """
    Sync database URL for migrations.

    ``alembic -x dburl=...`` wins over the application settings, which is
    handy for migrating a one-off database without touching the environment.
    """
    override = context.get_x_argument(as_dictionary=True).get("dburl")
    return override or get_settings().database_url_sync


def _configure_kwargs(url: str) -> dict:
    # SQLite cannot ALTER most constraints in place
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    url = get_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations over a sync connection (psycopg2 for PostgreSQL)."""
    url = get_url()
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs(url))

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
