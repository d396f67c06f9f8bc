import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from taskgate.database import get_db
from taskgate.main import app


# In-memory database shared by every session of a test
@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(engine):
    def get_test_db():
        with Session(engine) as db:
            yield db

    app.dependency_overrides[get_db] = get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def register(client):
    def _register(username="alice", email=None, password="secret123"):
        resp = client.post(
            "/auth/register",
            json={"username": username, "email": email or f"{username}@example.com", "password": password},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _register


@pytest.fixture()
def auth_headers(register):
    def _auth_headers(username="alice"):
        token = register(username)["token"]
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
