import os

from cryptography.fernet import Fernet

# Settings are read at import time, so the environment has to be ready first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "sql"
os.environ.pop("TERRA_WEBHOOK_SECRET", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from fitness_service.database import Base, build_engine
from fitness_service.main import app
from fitness_service.repositories.memory import InMemoryStore
from fitness_service.repositories.provider import get_repositories
from fitness_service.repositories.sql import sql_repositories


@pytest.fixture(params=["sql", "memory"])
def repositories_factory(request):
    """Yields a dependency that hands out repositories on a fresh, empty store."""
    if request.param == "memory":
        store = InMemoryStore()
        yield store.repositories
        return

    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def sql_dependency():
        db = session_factory()
        try:
            yield sql_repositories(db)
        finally:
            db.close()

    yield sql_dependency
    engine.dispose()


@pytest.fixture
def repos(repositories_factory):
    """A repository set for tests that talk to the stores directly."""
    provider = repositories_factory()
    if not hasattr(provider, "__next__"):
        yield provider
        return
    yield next(provider)
    provider.close()


@pytest.fixture
def client(repositories_factory):
    app.dependency_overrides[get_repositories] = repositories_factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register(client, email="alex@example.com", password="secret123", name="Alex"):
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["data"]


@pytest.fixture
def auth_headers(client):
    headers, _ = register(client)
    return headers


@pytest.fixture
def other_headers(client):
    headers, _ = register(client, email="sam@example.com", name="Sam")
    return headers
