from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# 설정은 import 시점에 읽히므로 앱 import 전에 환경변수를 고정
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["OPENAI_API_KEY"] = ""

from mindspace.backend.dependencies.services import get_completion_provider  # noqa: E402
from mindspace.backend.main import app  # noqa: E402
from mindspace.db import base as _base  # noqa: E402,F401
from mindspace.db.session import get_session, make_engine  # noqa: E402

AI_REPLY = "That sounds really heavy. I'm here with you."
STRONG_PASSWORD = "Abc123"


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(eng)
    yield eng
    SQLModel.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def ai_calls() -> list:
    return []


@pytest.fixture
def client(engine, ai_calls):
    def _session():
        with Session(engine) as s:
            yield s

    def _provider():
        def complete(prompt: str) -> str:
            ai_calls.append(prompt)
            return AI_REPLY
        return complete

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_completion_provider] = _provider
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, username="alice01", email="a@x.com", password=STRONG_PASSWORD):
    r = client.post("/auth/register", json={
        "username": username,
        "email": email,
        "password": password,
    })
    assert r.status_code == 201, r.text
    return r.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    data = register(client)
    return {"token": data["token"], "id": data["user"]["id"], "headers": bearer(data["token"])}


@pytest.fixture
def bob(client):
    data = register(client, username="bob_02", email="bob@example.com")
    return {"token": data["token"], "id": data["user"]["id"], "headers": bearer(data["token"])}
