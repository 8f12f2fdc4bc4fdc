"""MongoDB configuration using pydantic-settings."""

from functools import cached_property
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.asynchronous.mongo_client import AsyncMongoClient


class MongoConfiguration(BaseSettings):
    """Configuration and factory for MongoDB resources.

    All settings can be configured via environment variables with the
    VANTAGE_MONGO_ prefix. For example:
    - VANTAGE_MONGO_URI=mongodb://localhost:27017
    - VANTAGE_MONGO_DATABASE=myapp
    - VANTAGE_MONGO_SNAPSHOTS_COLLECTION=balance_snapshots

    The configuration also acts as a factory, providing lazy-initialized
    properties for the MongoDB client, database, and collections.

    Attributes:
        uri: MongoDB connection URI.
        database: Database name to use.
        snapshots_collection: Collection name for projection snapshots.
        snapshot_mode: Storage mode for snapshots - "single" overwrites,
            "multiple" keeps version history.
        batch_size: Number of documents fetched per round trip when
            streaming records, None for the driver default.
        max_pool_size: Maximum number of pooled connections.
        server_selection_timeout_ms: Server selection timeout in milliseconds.

    Example:
        >>> config = MongoConfiguration()
        >>>
        >>> # Readers over any collection
        >>> source = MongoReader(
        ...     config.collection("transactions"),
        ...     id_field="account_id",
        ...     versioning_key="booked_at",
        ...     batch_size=config.batch_size,
        ... )
        >>>
        >>> # Snapshot storage over the snapshots collection
        >>> snapshots = MongoSnapshotStorage(config)
        >>>
        >>> await config.on_shutdown()
    """

    # Connection settings
    uri: str = "mongodb://localhost:27017"
    database: str = "vantage"
    max_pool_size: int = Field(default=100, ge=1)
    server_selection_timeout_ms: int = Field(default=30000, ge=0)

    snapshots_collection: str = "snapshots"

    # Snapshot storage mode
    snapshot_mode: Literal["single", "multiple"] = "multiple"

    batch_size: int | None = Field(default=None, ge=1)

    model_config = {"env_prefix": "VANTAGE_MONGO_"}

    @cached_property
    def client(self) -> AsyncMongoClient[dict[str, Any]]:
        """Get the MongoDB async client.

        The client is lazily created and cached for reuse.
        """
        return AsyncMongoClient(
            self.uri,
            maxPoolSize=self.max_pool_size,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
        )

    @cached_property
    def db(self) -> AsyncDatabase[dict[str, Any]]:
        """Get the MongoDB async database.

        Uses the database name from configuration.
        """
        return self.client[self.database]

    @cached_property
    def snapshots(self) -> AsyncCollection[dict[str, Any]]:
        """Get the snapshots collection."""
        return self.db[self.snapshots_collection]

    def collection(self, name: str) -> AsyncCollection[dict[str, Any]]:
        """Get a collection of the configured database by name."""
        return self.db[name]

    async def on_shutdown(self) -> None:
        """Close the MongoDB client connection if it was created."""
        if "client" in self.__dict__:
            await self.client.close()
