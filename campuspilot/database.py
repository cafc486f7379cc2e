"""
MongoDB connection handling.

MongoStore owns a single Motor client. The first caller connects it, later
callers reuse it; a ping before reuse detects a dropped connection and a new
client is created in its place. Motor pools connections internally, so the
handle is shared by all requests without extra locking.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Set, Tuple

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from campuspilot.config import Settings
from campuspilot.errors import StoreError

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Any]


class MongoStore:
    """Lazily connected, self-healing handle to one MongoDB database."""

    def __init__(
        self,
        url: str,
        database_name: str,
        server_selection_timeout_ms: int = 5000,
        client_factory: ClientFactory = AsyncIOMotorClient,
    ):
        self._url = url
        self._database_name = database_name
        self._timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        self._lock = asyncio.Lock()
        self._indexes: Set[Tuple[str, str, bool]] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoStore":
        return cls(
            settings.mongodb_url,
            settings.mongodb_database,
            server_selection_timeout_ms=settings.mongodb_server_selection_timeout_ms,
        )

    @property
    def connected(self) -> bool:
        return self._client is not None

    @staticmethod
    async def _ping(client: Any) -> bool:
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB liveness check failed: %s", e)
            return False
        return True

    async def _connect(self) -> Any:
        client = self._client_factory(self._url, serverSelectionTimeoutMS=self._timeout_ms)
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            logger.error("MongoDB connection failed: %s", e)
            raise StoreError(f"MongoDB connection failed: {e}") from e
        logger.info("MongoDB connected (database=%s)", self._database_name)
        return client

    async def get_database(self) -> AsyncIOMotorDatabase:
        """Return the database handle, connecting or reconnecting if needed."""
        client = self._client
        if client is not None and await self._ping(client):
            return client[self._database_name]

        async with self._lock:
            # Another caller may have reconnected while we waited for the lock
            if self._client is not None and self._client is not client:
                return self._client[self._database_name]
            if self._client is not None:
                logger.info("Dropping dead MongoDB client and reconnecting.")
                self._client.close()
                self._client = None
            self._client = await self._connect()
            return self._client[self._database_name]

    async def get_collection(self, name: str) -> AsyncIOMotorCollection:
        database = await self.get_database()
        return database[name]

    async def ensure_index(self, name: str, field: str, unique: bool = False) -> AsyncIOMotorCollection:
        """Return the collection, creating the index on first use by this store."""
        collection = await self.get_collection(name)
        key = (name, field, unique)
        if key not in self._indexes:
            await collection.create_index(field, unique=unique)
            self._indexes.add(key)
            logger.info("Ensured index on %s.%s (unique=%s)", name, field, unique)
        return collection

    async def close(self) -> None:
        """Close the client on application shutdown."""
        async with self._lock:
            if self._client is not None:
                logger.info("Closing MongoDB connection.")
                self._client.close()
                self._client = None
