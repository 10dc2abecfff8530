import pytest
from pymongo.errors import ServerSelectionTimeoutError

from app.db import mongo
from app.db.mongo import Database
from app.models.user import User


class ScriptedClient:
    """Stands in for AsyncIOMotorClient; pings fail until `up_after` clients exist."""

    created = []
    up_after = None

    def __init__(self, *args, **kwargs):
        self.kwargs = kwargs
        self.closed = False
        self.admin = self
        ScriptedClient.created.append(self)

    async def command(self, name):
        if self.up_after is None or len(self.created) < self.up_after:
            raise ServerSelectionTimeoutError("no servers available")
        return {"ok": 1.0}

    def __getitem__(self, name):
        return {"name": name}

    def close(self):
        self.closed = True


@pytest.fixture
def scripted_client(monkeypatch):
    ScriptedClient.created = []
    ScriptedClient.up_after = None
    monkeypatch.setattr(mongo, "AsyncIOMotorClient", ScriptedClient)
    return ScriptedClient


@pytest.mark.asyncio
async def test_connect_gives_up_after_max_retries(scripted_client):
    database = Database(url="mongodb://nowhere:27017")

    with pytest.raises(ConnectionError):
        await database.connect(max_retries=3, retry_delay=0)

    assert len(scripted_client.created) == 3
    assert all(client.closed for client in scripted_client.created)
    assert not database.is_connected


@pytest.mark.asyncio
async def test_connect_recovers_on_later_attempt(scripted_client):
    scripted_client.up_after = 2
    database = Database(url="mongodb://flaky:27017", db_name="devserve")

    await database.connect(max_retries=3, retry_delay=0)

    assert len(scripted_client.created) == 2
    assert database.is_connected
    assert database.db == {"name": "devserve"}
    assert await database.ping() is True


@pytest.mark.asyncio
async def test_connect_passes_timeouts(scripted_client):
    scripted_client.up_after = 1

    await Database(url="mongodb://localhost:27017").connect(max_retries=1, retry_delay=0)

    kwargs = scripted_client.created[0].kwargs
    assert kwargs["serverSelectionTimeoutMS"] == 5000
    assert kwargs["connectTimeoutMS"] == 10000


@pytest.mark.asyncio
async def test_unconnected_database():
    database = Database(url="mongodb://localhost:27017")

    assert await database.ping() is False
    with pytest.raises(RuntimeError):
        database.model(User)


@pytest.mark.asyncio
async def test_close_resets_handle(scripted_client):
    scripted_client.up_after = 1
    database = Database(url="mongodb://localhost:27017")
    await database.connect(max_retries=1, retry_delay=0)

    await database.close()

    assert not database.is_connected
    assert scripted_client.created[0].closed


@pytest.mark.asyncio
async def test_model_is_cached_per_kind(database):
    assert database.model(User) is database.model(User)
    assert database.model(User).kind is User
