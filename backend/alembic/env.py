"""
Alembic environment for the Adaptive Chat schema.

The target URL is never read from alembic.ini: it is the sync variant of
the application's database URL (DATABASE_URL_OVERRIDE or POSTGRES_*), so
migrations and the API always point at the same database.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from adaptive_chat.config import get_settings
from adaptive_chat.db.base import Base
from adaptive_chat.db import models  # noqa: F401 - registers users/modes/chats/chat_messages

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata
migration_url = get_settings().database_url_sync


def run_migrations_offline() -> None:
    """Render the migration SQL to stdout (`alembic upgrade head --sql`)."""
    context.configure(
        url=migration_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Apply migrations over a short-lived sync connection.

    psycopg2 on PostgreSQL, pysqlite for local SQLite files; SQLite only
    supports ALTER TABLE through batch mode.
    """
    engine = create_engine(migration_url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
