"""Pytest configuration to ensure local testing defaults."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# During pytest runs we force SQLAlchemy to use a local sqlite database so that tests
# do not require a running PostgreSQL server.
default_sqlite_url = f"sqlite:///{(BACKEND_DIR / 'tests' / 'test_items.db').resolve().as_posix()}"
os.environ.setdefault("DATABASE_URL", default_sqlite_url)

from app.config import Settings  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models import Item  # noqa: E402
from app.services.storage import InventoryStorage  # noqa: E402

ITEM_FIELDS = [column.key for column in Item.__table__.columns]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite:///{(tmp_path / 'items.db').as_posix()}")


@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(db_session, settings) -> InventoryStorage:
    return InventoryStorage(db_session, settings)


@pytest.fixture
def make_item():
    """Plain item snapshot for exporter tests; unset fields are ``None``."""

    def factory(photos=(), **fields):
        values = {name: None for name in ITEM_FIELDS}
        values.update(fields)
        values["photos"] = [SimpleNamespace(url=url) for url in photos]
        return SimpleNamespace(**values)

    return factory
