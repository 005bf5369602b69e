"""Alembic environment for the broadcast schema.

The database URL always comes from the ``POSTGRES_*`` environment
variables; ``alembic.ini`` carries no URL of its own.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool

from broadcast_shared.config import PostgresConfig
from broadcast_shared.db.base import Base, create_db_engine

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Importing broadcast_shared.db registers every model on Base.metadata.
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without a database connection."""
    context.configure(
        url=PostgresConfig().dsn,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_db_engine(PostgresConfig().dsn, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
