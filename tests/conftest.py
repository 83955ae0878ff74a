"""
Shared fixtures: an in-memory MongoDB behind a motor-shaped async adapter,
an app wired to it and token helpers.
"""

import httpx
import bcrypt
import mongomock
import pytest
from fastapi.testclient import TestClient

from learnify.ai.gemini_client import GeminiClient
from learnify.auth.security import issue_token
from learnify.config import Settings
from learnify.database import Database
from learnify.main import create_app

JWT_SECRET = "test-secret"

_gensalt = bcrypt.gensalt


# ==================== ASYNC MONGOMOCK ADAPTER ====================

class AsyncCursor:
    def __init__(self, cursor):
        self._cursor = cursor

    def sort(self, key_or_list, direction=None):
        self._cursor = self._cursor.sort(key_or_list, direction)
        return self

    def limit(self, count):
        self._cursor = self._cursor.limit(count)
        return self

    async def to_list(self, length=None):
        docs = list(self._cursor)
        return docs[:length] if length else docs

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._cursor:
            yield doc


class AsyncCollection:
    def __init__(self, collection):
        self.sync = collection

    def find(self, *args, **kwargs):
        return AsyncCursor(self.sync.find(*args, **kwargs))

    async def find_one(self, *args, **kwargs):
        return self.sync.find_one(*args, **kwargs)

    async def insert_one(self, document, **kwargs):
        return self.sync.insert_one(document, **kwargs)

    async def update_one(self, *args, **kwargs):
        return self.sync.update_one(*args, **kwargs)

    async def find_one_and_update(self, *args, **kwargs):
        return self.sync.find_one_and_update(*args, **kwargs)

    async def count_documents(self, *args, **kwargs):
        return self.sync.count_documents(*args, **kwargs)

    async def create_index(self, *args, **kwargs):
        return self.sync.create_index(*args, **kwargs)


class AsyncDatabase:
    def __init__(self, db):
        self.sync = db

    def __getitem__(self, name):
        return AsyncCollection(self.sync[name])


# ==================== FIXTURES ====================

@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(bcrypt, "gensalt", lambda: _gensalt(rounds=4))


@pytest.fixture
def settings():
    return Settings(mongodb_uri="mongodb://localhost:27017", jwt_secret=JWT_SECRET, gemini_api_key="server-key")


@pytest.fixture
def mongo():
    """Synchronous view of the test database for setup and assertions"""
    return mongomock.MongoClient()["learnify_test"]


@pytest.fixture
def database(mongo):
    return Database(AsyncDatabase(mongo))


def _no_network(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected outbound request to {request.url}")


@pytest.fixture
def make_client(settings, database):
    """Build a started TestClient, optionally with a custom Gemini client or without sample data"""
    started = []

    def factory(gemini=None, seed=True, **overrides):
        app_settings = settings.model_copy(update={"seed_sample_data": seed, **overrides})
        gemini = gemini or GeminiClient(transport=httpx.MockTransport(_no_network))
        client = TestClient(create_app(app_settings, database, gemini))
        client.__enter__()
        started.append(client)
        return client

    yield factory
    for client in started:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


def auth_headers(user_id: int, role: str) -> dict:
    token, _ = issue_token(user_id, role, JWT_SECRET)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student():
    """Alex Sharma from the sample data"""
    return auth_headers(1, "student")


@pytest.fixture
def faculty():
    """Dr. Meera Iyer from the sample data"""
    return auth_headers(6, "faculty")


@pytest.fixture
def admin():
    return auth_headers(7, "admin")
