import os
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")

import database as database_module  # noqa: E402
from database import Base  # noqa: E402
from inheritance.config import get_settings  # noqa: E402


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    # Ensure all model metadata is registered before creating tables.
    import models  # noqa: F401

    database_url = os.getenv("TEST_DATABASE_URL") or "sqlite+pysqlite:///:memory:"
    engine_kwargs = {}
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if ":memory:" in database_url:
            engine_kwargs["poolclass"] = StaticPool
    test_engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)

    tables = list(Base.metadata.tables.values())
    Base.metadata.create_all(bind=test_engine, tables=tables)

    original_engine = database_module.engine
    database_module.engine = test_engine
    try:
        yield test_engine
    finally:
        database_module.engine = original_engine
        Base.metadata.drop_all(bind=test_engine, tables=tables)
        test_engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Generator[Session, None, None]:
    connection = engine.connect()
    transaction = connection.begin()
    session = sessionmaker(bind=connection, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture()
def settings_env(monkeypatch: pytest.MonkeyPatch):
    """Clear the cached settings around tests that change the environment."""
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
