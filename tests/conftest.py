import os
import sys
from http.cookies import SimpleCookie
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENV", "test")
os.environ.setdefault("SESSION_BACKEND", "memory")

from app.core.config import settings
from app.main import app
from app.services import codec
from app.services.session_store import session_store


@pytest.fixture(autouse=True)
def clear_sessions():
    session_store.clear()
    yield
    session_store.clear()


@pytest.fixture(scope="function")
def client():
    return TestClient(app)


def cookie_counters(client: TestClient) -> dict[str, int]:
    raw = client.cookies.get(settings.counter_cookie_name)
    if raw is None:
        return {}
    cookie = SimpleCookie()
    cookie.load(f"{settings.counter_cookie_name}={raw}")
    return codec.decode(cookie[settings.counter_cookie_name].value)


def end_session(client: TestClient) -> None:
    client.cookies.delete(settings.session_cookie_name)


@pytest.fixture
def read_counters():
    return cookie_counters


@pytest.fixture
def new_session():
    return end_session


# http.cookiejar files host-only cookies from "testserver" under this domain.
COOKIE_DOMAIN = "testserver.local"


def make_client(cookies: dict[str, str] | None = None) -> TestClient:
    test_client = TestClient(app)
    for name, value in (cookies or {}).items():
        test_client.cookies.set(name, value, domain=COOKIE_DOMAIN)
    return test_client


@pytest.fixture
def seeded_client():
    return make_client
