import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from kubra_market.core.sessions import SessionStore
from kubra_market.db.base import Base
from kubra_market.db.session import build_engine, get_db
from kubra_market.main import app

from helpers import register_and_login


@pytest.fixture
def engine(tmp_path):
    # File database: several connections (threads, requests) see the same data
    engine = build_engine(f"sqlite:///{tmp_path / 'kubra.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client_factory(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.session_store = SessionStore()
    clients = []

    def make_client():
        c = TestClient(app)
        clients.append(c)
        return c

    yield make_client

    for c in clients:
        c.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_factory):
    return client_factory()


@pytest.fixture
def merchant_client(client_factory):
    c = client_factory()
    c.merchant = register_and_login(c, "alice")
    return c
