"""
Test infrastructure for the user service.

- MongoDB is replaced by mongomock-motor's in-memory client, injected into
  the Database handle the same way the lifespan injects the real one.
- Each test gets a fresh database with the production indexes, so the unique
  userId index is enforced exactly as in production.
- The app's get_database dependency is overridden; the lifespan never runs,
  so no real MongoDB connection is attempted.
- bcrypt runs at its minimum cost factor to keep the suite fast.
"""
import asyncio

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from app.core.config import settings
from app.db.indexes import create_indexes
from app.db.mongo import Database, get_database
from app.main import app
from app.models.entity import MongoDocumentModel
from app.models.user import User


class InterleavingModel(MongoDocumentModel):
    """
    MongoDocumentModel that yields to the event loop before every store call,
    so concurrent tasks interleave the way they do against a remote server.
    """

    async def insert_one(self, document):
        await asyncio.sleep(0)
        return await super().insert_one(document)

    async def find_one(self, filter, sort=None):
        await asyncio.sleep(0)
        return await super().find_one(filter, sort=sort)

    async def get_counter(self):
        await asyncio.sleep(0)
        return await super().get_counter()

    async def raise_counter_floor(self, floor):
        await asyncio.sleep(0)
        return await super().raise_counter_floor(floor)

    async def increment_counter(self):
        await asyncio.sleep(0)
        return await super().increment_counter()


class UnreachableModel:
    """DocumentModel whose every store call fails like a down server."""

    kind = User

    def _fail(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("localhost:27017: connection refused")

    async def insert_one(self, document):
        self._fail()

    async def find(self, filter, skip=0, limit=0, sort=None):
        self._fail()

    async def find_one(self, filter, sort=None):
        self._fail()

    async def find_one_and_update(self, filter, fields):
        self._fail()

    async def find_one_and_delete(self, filter):
        self._fail()

    async def count(self, filter):
        self._fail()

    async def get_counter(self):
        self._fail()

    async def raise_counter_floor(self, floor):
        self._fail()

    async def increment_counter(self):
        self._fail()


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest_asyncio.fixture
async def database() -> Database:
    db = Database(client=AsyncMongoMockClient(), db_name="devserve_test")
    await create_indexes(db)
    yield db


@pytest_asyncio.fixture
async def users(database: Database) -> MongoDocumentModel:
    """The User document model bound to the test database."""
    return database.model(User)


@pytest_asyncio.fixture
async def interleaving_users(database: Database) -> InterleavingModel:
    return InterleavingModel(
        User,
        collection=database.db[User.collection],
        counters=database.db["counters"],
    )


@pytest_asyncio.fixture
async def async_client(database: Database) -> AsyncClient:
    """
    Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport,
    with the database dependency pointing at the in-memory store.
    """
    app.dependency_overrides[get_database] = lambda: database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def api() -> str:
    return settings.API_PREFIX


@pytest.fixture
def unreachable_users() -> UnreachableModel:
    return UnreachableModel()
