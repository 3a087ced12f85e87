import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import importlib

import pytest
from fastapi.testclient import TestClient

from todoapp.auth.accounts import AccountStore
from todoapp.auth.passwords import CredentialHasher
from todoapp.auth.sessions import SessionManager
from todoapp.auth.tokens import TokenCodec
from todoapp.infra.document_store import DocumentStore

SECRET = "abc123"


@pytest.fixture(scope="session")
def hasher() -> CredentialHasher:
    return CredentialHasher()


@pytest.fixture()
def codec() -> TokenCodec:
    return TokenCodec(SECRET)


@pytest.fixture()
def accounts() -> AccountStore:
    return AccountStore(DocumentStore("accounts"))


@pytest.fixture()
def sessions(accounts, hasher, codec) -> SessionManager:
    return SessionManager(accounts, hasher, codec)


@pytest.fixture()
def app_module(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", SECRET)
    monkeypatch.setenv("TODOAPP_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("TODOAPP_AUTH_HEADER", raising=False)

    import todoapp.app as app_module
    importlib.reload(app_module)
    return app_module


@pytest.fixture()
def client(app_module) -> TestClient:
    return TestClient(app_module.app)


@pytest.fixture()
def seed(app_module, hasher):
    """
    Two accounts and two todos:
      - dan@test.com / userOnePass, with one auth token already issued
      - dan2@test.com / userTwoPass, no tokens
      - "First test todo" (open), "Second test todo" (completed at 333)
    """
    state = app_module.app.state
    one = state.accounts.create("dan@test.com", hasher.hash("userOnePass"))
    one_token = state.sessions.issue_session(one)
    two = state.accounts.create("dan2@test.com", hasher.hash("userTwoPass"))

    todos = state.todos
    first = todos.create("First test todo")
    second = todos.create("Second test todo")
    second = todos.update(second["id"], completed=True)

    return {
        "users": [
            {"id": one.id, "email": "dan@test.com", "password": "userOnePass", "token": one_token},
            {"id": two.id, "email": "dan2@test.com", "password": "userTwoPass"},
        ],
        "todos": [first, second],
    }
