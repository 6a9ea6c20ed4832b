"""
Shared fixtures: an isolated in-memory store, per-user API clients and
an LLM client with no key so every AI feature uses its fallback.
"""
import pytest
from fastapi.testclient import TestClient

from harmony.core.config import get_settings
from harmony.main import app
from harmony.services import llm_client
from harmony.services.llm_client import LLMClient
from harmony.storage import MemStorage, get_storage

PASSWORD = "secret123"


@pytest.fixture
def storage():
    store = MemStorage()
    app.dependency_overrides[get_storage] = lambda: store
    yield store
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def offline_llm(monkeypatch):
    monkeypatch.setattr(llm_client, "_llm_client", LLMClient(api_key=""))


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(get_settings(), "upload_dir", str(path))
    return path


@pytest.fixture
def client(storage):
    """Anonymous client (no session cookie)"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(storage):
    """
    Register a user on a fresh client and return (client, user_json).

    Each returned client carries its own session cookie.
    """
    clients = []

    def _make(username: str, **fields):
        test_client = TestClient(app)
        clients.append(test_client)
        payload = {
            "username": username,
            "password": PASSWORD,
            "email": f"{username}@example.com",
            "name": username.title(),
            **fields,
        }
        response = test_client.post("/api/register", json=payload)
        assert response.status_code == 201, response.text
        return test_client, response.json()

    yield _make
    for test_client in clients:
        test_client.close()


@pytest.fixture
def seeker(make_user):
    return make_user("alice", title="Backend Developer", skills=["Python", "FastAPI"])


@pytest.fixture
def recruiter(make_user):
    return make_user("rita", is_recruiter=True, company="Acme")
