"""Declarative base plus engine and session helpers."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    pass


def create_db_engine(dsn: str, **kwargs: object) -> Engine:
    """Build an engine; ``kwargs`` go straight to ``create_engine``
    (pool sizing, ``pool_pre_ping``, SQLite ``poolclass`` in tests)."""
    return create_engine(dsn, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    # Stores return plain values built from committed rows after the
    # session closes, so attributes must not expire on commit.
    return sessionmaker(bind=engine, expire_on_commit=False)
