"""Fixtures for the shared database layer.

One in-memory SQLite database serves the whole run. Each test works inside
an outer transaction that is rolled back afterwards.
"""

from collections.abc import Generator

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from broadcast_shared.db.base import Base, create_db_engine


@pytest.fixture(scope="session")
def db_engine() -> Generator[Engine, None, None]:
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(db_engine: Engine) -> Generator[Session, None, None]:
    with db_engine.connect() as connection:
        outer = connection.begin()
        session = Session(bind=connection)
        try:
            yield session
        finally:
            session.close()
            # A failed flush already rolled the outer transaction back.
            if outer.is_active:
                outer.rollback()
