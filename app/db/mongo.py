"""
app/db/mongo.py

Purpose: MongoDB connection setup

- Database handle wrapping a Motor client, created once at startup
- Bounded connection retry with a fixed delay
- Health checks and connection lifecycle management
- FastAPI dependency returning the handle stored on app.state
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from fastapi import Request
from typing import Dict, Optional
import asyncio
from app.core.config import settings
from app.core.logging import get_logger
from app.models.entity import EntityKind, MongoDocumentModel

logger = get_logger(__name__)

COUNTERS_COLLECTION = "counters"


class Database:
    """
    Process-wide MongoDB handle.

    Built once during application startup and passed to the service layer.
    A pre-built client may be supplied instead of a URL (used by tests).
    """

    def __init__(
        self,
        url: Optional[str] = None,
        db_name: Optional[str] = None,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        self.url = url or settings.MONGODB_URL
        self.db_name = db_name or settings.MONGODB_DB_NAME
        self._client = client
        self._db: Optional[AsyncIOMotorDatabase] = client[self.db_name] if client is not None else None
        self._models: Dict[str, MongoDocumentModel] = {}

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise RuntimeError(
                "Database not initialized. Call connect() during startup."
            )
        return self._db

    async def connect(
        self,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ):
        """
        Establishes connection to MongoDB with retry logic.
        Called during application startup.

        Raises:
            ConnectionError: if every attempt fails
        """
        if self._client is not None:
            logger.warning("MongoDB client already initialized")
            return

        max_retries = max_retries or settings.MONGODB_MAX_RETRIES
        retry_delay = settings.MONGODB_RETRY_DELAY if retry_delay is None else retry_delay

        for attempt in range(1, max_retries + 1):
            client = None
            try:
                logger.info(
                    f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
                )

                client = AsyncIOMotorClient(
                    self.url,
                    serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                    connectTimeoutMS=settings.MONGODB_CONNECT_TIMEOUT_MS,
                    retryWrites=True,
                    retryReads=True,
                )

                # Verify connection
                await client.admin.command("ping")

                self._client = client
                self._db = client[self.db_name]
                logger.info(f"✅ Successfully connected to MongoDB: {self.db_name}")
                return

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                if client is not None:
                    client.close()
                logger.error(
                    f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
                )

                if attempt < max_retries:
                    logger.info(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                else:
                    logger.critical(
                        "Failed to connect to MongoDB after all retries. "
                        "Check MONGODB_URL and that the server is reachable."
                    )
                    raise ConnectionError("Could not establish MongoDB connection") from e

    async def close(self):
        """
        Closes the MongoDB connection.
        Called during application shutdown.
        """
        if self._client is not None:
            logger.info("Closing MongoDB connection")
            self._client.close()
            self._client = None
            self._db = None
            self._models.clear()
            logger.info("MongoDB connection closed")

    async def ping(self) -> bool:
        """
        Checks if the database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            if self._client is None:
                logger.error("MongoDB client not initialized")
                return False

            await self._client.admin.command("ping")
            return True

        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False

    def model(self, kind: EntityKind) -> MongoDocumentModel:
        """
        Returns the document model for an entity kind, bound to this database.
        """
        if kind.name not in self._models:
            self._models[kind.name] = MongoDocumentModel(
                kind,
                collection=self.db[kind.collection],
                counters=self.db[COUNTERS_COLLECTION],
            )
        return self._models[kind.name]


def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the database handle created at startup.

    Raises:
        RuntimeError: If the application has not connected yet
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError(
            "Database not initialized. The application lifespan must connect first."
        )
    return database
