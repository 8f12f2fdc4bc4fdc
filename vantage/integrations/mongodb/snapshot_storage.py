"""MongoDB storage for projection snapshots."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from bson import Decimal128
from pydantic import BaseModel, Field
from ulid import ULID

from vantage.reading import Consumer, Reader, ReadSpec
from vantage.reading.reader import T
from vantage.snapshots import Snapshot

from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration
from .reader import MongoReader
from .type_loader import get_qualified_name, load_type


class SnapshotDocument(BaseModel):
    """Snapshot document representation for MongoDB storage."""

    snapshot_id: str
    entity_id: Any
    version: Any
    data: Any = Field(description="Serialized projection state")
    data_type: str | None = Field(
        default=None,
        description="Fully qualified type name of a pydantic projection state",
    )

    @classmethod
    def from_value(cls, snapshot: Snapshot) -> "SnapshotDocument":
        """Create a document from a snapshot.

        Pydantic projection states are stored as JSON-compatible data with
        their type name and ``Decimal`` states as ``Decimal128``. Any other
        state is stored as given and must be BSON-encodable, so plain
        containers holding ``Decimal`` values are rejected on save; use a
        pydantic model for such states.
        """
        data = snapshot.data
        data_type = None
        if isinstance(data, BaseModel):
            data_type = get_qualified_name(type(data))
            data = data.model_dump(mode="json")
        elif isinstance(data, Decimal):
            data = Decimal128(data)

        return cls(
            snapshot_id=str(snapshot.id),
            entity_id=snapshot.entity_id,
            version=snapshot.version,
            data=data,
            data_type=data_type,
        )

    def to_value(self) -> Snapshot:
        """Convert the document back to a snapshot."""
        data = self.data
        if isinstance(data, Decimal128):
            data = data.to_decimal()
        elif self.data_type is not None:
            data = load_type(self.data_type).model_validate(data)

        return Snapshot(
            id=ULID.from_str(self.snapshot_id),
            entity_id=self.entity_id,
            version=self.version,
            data=data,
        )


def document_to_snapshot(document: dict[str, Any]) -> Snapshot:
    return SnapshotDocument.model_validate(document).to_value()


class SnapshotStrategy(ABC):
    """Strategy for snapshot storage behavior.

    Encapsulates the differences between single and multiple snapshot modes:
    - Index specifications
    - Save behavior (overwrite vs append)
    """

    @property
    @abstractmethod
    def indexes(self) -> list[IndexSpec]:
        """Index specifications for this strategy."""
        ...

    @abstractmethod
    async def save(self, collection: IndexedCollection, document: SnapshotDocument) -> None:
        """Save a snapshot document using this strategy."""
        ...


class SingleSnapshotStrategy(SnapshotStrategy):
    """One snapshot per entity, overwritten on save.

    Only the newest snapshot is kept, so bounded reads (``until`` or
    ``through`` before it) find no snapshot and fall back to folding from the
    first record.
    """

    @property
    def indexes(self) -> list[IndexSpec]:
        return [IndexSpec(keys=[("entity_id", IndexDirection.ASC)], unique=True)]

    async def save(self, collection: IndexedCollection, document: SnapshotDocument) -> None:
        await collection.replace_one(
            {"entity_id": document.entity_id},
            document.model_dump(),
            upsert=True,
        )


class MultipleSnapshotStrategy(SnapshotStrategy):
    """Keeps every saved snapshot, supporting bounded historical reads."""

    @property
    def indexes(self) -> list[IndexSpec]:
        return [
            IndexSpec(
                keys=[
                    ("entity_id", IndexDirection.ASC),
                    ("version", IndexDirection.DESC),
                ],
                unique=True,
            ),
        ]

    async def save(self, collection: IndexedCollection, document: SnapshotDocument) -> None:
        await collection.insert_one(document.model_dump())


class MongoSnapshotStorage(Reader):
    """MongoDB-backed snapshot storage usable as a store's snapshot reader.

    Supports two storage modes controlled by the ``snapshot_mode`` config:

    - **single**: One snapshot per entity (overwrites on save).
    - **multiple**: Every saved version is kept (appends), so reads bounded
      by ``until``/``through`` can start from an older snapshot.

    Document schema:
        {
            "_id": ObjectId,
            "snapshot_id": "ULID string",
            "entity_id": <entity identity>,
            "version": <version of the last folded record>,
            "data": { ... serialized projection ... },
            "data_type": "module.ClassName" | null
        }

    Reads return ``Snapshot`` models; pydantic projection states are
    revalidated into their original type.

    Example:
        >>> storage = MongoSnapshotStorage(MongoConfiguration())
        >>> await storage.save_snapshot(
        ...     Snapshot(entity_id=account_id, version=120, data=balance)
        ... )
        >>> store = Store(AvailableBalance(), source, snapshot=storage)
    """

    def __init__(self, config: MongoConfiguration) -> None:
        self._strategy: SnapshotStrategy = (
            SingleSnapshotStrategy()
            if config.snapshot_mode == "single"
            else MultipleSnapshotStrategy()
        )
        self._collection = IndexedCollection(config.snapshots, indexes=self._strategy.indexes)
        self._reader = MongoReader(
            config.snapshots,
            id_field="entity_id",
            versioning_key="version",
            batch_size=config.batch_size,
            projection={"_id": False},
            to_record=document_to_snapshot,
        )

    async def read(self, spec: ReadSpec) -> list[Snapshot]:
        await self._collection.ensure_indexes()
        return await self._reader.read(spec)

    async def stream(self, spec: ReadSpec, consumer: Consumer[T]) -> T:
        await self._collection.ensure_indexes()
        return await self._reader.stream(spec, consumer)

    async def save_snapshot(self, snapshot: Snapshot) -> None:
        """Save a snapshot.

        In single mode, overwrites the entity's existing snapshot.
        In multiple mode, appends a new version.
        """
        await self._strategy.save(self._collection, SnapshotDocument.from_value(snapshot))

    async def delete_snapshots(self, entity_id: Any) -> int:
        """Delete every snapshot of ``entity_id``, e.g. after changing a reducer.

        Returns:
            The number of deleted snapshots.
        """
        return await self._collection.delete_many({"entity_id": entity_id})
