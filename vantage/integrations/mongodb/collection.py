"""MongoDB collection wrapper with lazy index management.

Snapshot storage writes through an IndexedCollection so that the indexes
backing snapshot lookups exist before the first read or write.
"""

from enum import IntEnum
from typing import Any

from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection


class IndexDirection(IntEnum):
    """Sort direction for MongoDB index fields."""

    ASC = ASCENDING
    """Ascending order (1)."""

    DESC = DESCENDING
    """Descending order (-1)."""


class IndexSpec(BaseModel):
    """Specification for a MongoDB index.

    Example:
        >>> # Compound unique index
        >>> IndexSpec(
        ...     keys=[
        ...         ("entity_id", IndexDirection.ASC),
        ...         ("version", IndexDirection.DESC),
        ...     ],
        ...     unique=True,
        ... )
    """

    keys: list[tuple[str, IndexDirection]]
    """(field_name, direction) tuples."""

    unique: bool = False
    """If True, enforce uniqueness."""

    async def apply(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        """Apply this index specification to a collection.

        Args:
            collection: The MongoDB collection to create the index on.
        """
        kwargs: dict[str, Any] = {}
        if self.unique:
            kwargs["unique"] = True

        await collection.create_index(self.keys, **kwargs)


class IndexedCollection:
    """A MongoDB collection wrapper with automatic index management.

    IndexedCollection wraps an AsyncCollection and creates the configured
    indexes on first use.

    Example:
        >>> collection = IndexedCollection(
        ...     config.snapshots,
        ...     indexes=[
        ...         IndexSpec(keys=[("entity_id", 1), ("version", -1)], unique=True),
        ...     ]
        ... )
        >>> await collection.insert_one(doc)
    """

    def __init__(
        self,
        collection: AsyncCollection[dict[str, Any]],
        indexes: list["IndexSpec"] | None = None,
    ) -> None:
        self._collection = collection
        self._indexes = indexes or []
        self._indexes_created = False

    async def ensure_indexes(self) -> None:
        """Create indexes if not already created.

        Called automatically by the write methods, but can be called
        explicitly for eager initialization.
        """
        if self._indexes_created:
            return

        for spec in self._indexes:
            await spec.apply(self._collection)

        self._indexes_created = True

    async def insert_one(self, document: dict[str, Any]) -> None:
        """Insert a single document."""
        await self.ensure_indexes()
        await self._collection.insert_one(document)

    async def replace_one(
        self,
        filter: dict[str, Any],
        replacement: dict[str, Any],
        upsert: bool = False,
    ) -> None:
        """Replace a single document.

        Args:
            filter: MongoDB query filter.
            replacement: The new document.
            upsert: If True, insert if no matching document exists.
        """
        await self.ensure_indexes()
        await self._collection.replace_one(filter, replacement, upsert=upsert)

    async def delete_many(self, filter: dict[str, Any]) -> int:
        """Delete every document matching ``filter`` and return how many were removed."""
        await self.ensure_indexes()
        result = await self._collection.delete_many(filter)
        return result.deleted_count
