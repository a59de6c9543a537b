"""
Shared fixtures.

Every test gets a fresh in-process MongoDB (``mongomock_motor``)
injected as the shared motor client, so repositories, services and
the HTTP app all see the same empty store.
"""

import os
from typing import Callable, Dict

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

# Set test environment variables before importing the app.
os.environ.setdefault("MONGO_DB_NAME", "profiles_test")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from profile_api.app.core import db  # noqa: E402
from profile_api.app.core.security import create_access_token  # noqa: E402


@pytest.fixture
def store():
    db.set_client(AsyncMongoMockClient())
    yield db.get_profiles_collection()
    db.set_client(None)


@pytest_asyncio.fixture
async def indexed_store(store):
    await db.init_db()
    return store


@pytest.fixture
def api(store):
    from profile_api.app.main import app

    # No context manager: the store is injected, so startup/shutdown are skipped
    yield TestClient(app)


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    def _headers(username: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token({'sub': username})}"}

    return _headers


@pytest.fixture
def event_payload() -> Dict:
    return {
        "name": "Conf",
        "url": "https://x",
        "date": {"start": "2024-01-01", "end": "2024-01-02"},
        "isVirtual": True,
        "price": "0",
    }


@pytest.fixture
def milestone_payload() -> Dict:
    return {
        "title": "First talk",
        "description": "Spoke at a local meetup",
        "url": "https://example.com/talk",
        "icon": "FaMicrophone",
        "date": "2023-05-04",
        "isGoal": False,
        "order": 1,
    }
