"""MongoDB implementation of Reader.

Translates read specifications into ``find`` queries over any collection that
holds one document per record, with a field identifying the entity and a
field putting the records in order.
"""

import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

from pydantic import BaseModel, Field
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.cursor import AsyncCursor

from vantage.exceptions import UnknownPositionError
from vantage.reading import After, Before, Consumer, First, Last, Reader, ReadSpec, iterate
from vantage.reading.reader import T

LOGGER = logging.getLogger(__name__)


class MongoQuery(BaseModel):
    """A ``find`` query built from a ReadSpec."""

    filter: dict[str, Any]
    """MongoDB query filter."""

    sort: list[tuple[str, int]]
    """(field, direction) tuples."""

    limit: int | None = Field(default=None, ge=0)
    """Maximum number of documents, None for no limit."""

    @property
    def is_empty(self) -> bool:
        """True when the query can only match nothing (a limit of zero)."""
        return self.limit == 0


def _narrow(bounds: dict[str, Any], operator: str, value: Any) -> None:
    if operator in bounds:
        value = min(bounds[operator], value)
    bounds[operator] = value


class MongoReader(Reader):
    """A Reader over a MongoDB collection.

    Attributes:
        id_field: Field identifying the entity a document belongs to.
        versioning_key: Field putting an entity's documents in a
            deterministic order.
        batch_size: Documents fetched per round trip while streaming, None
            for the driver default.
        projection: Optional MongoDB projection limiting returned fields.

    Streams run inside a client session; the cursor is closed once the
    consumer returns or raises.

    Examples:
        Reading a transactions collection as a data source:

        >>> source = MongoReader(
        ...     config.collection("transactions"),
        ...     id_field="account_id",
        ...     versioning_key="booked_at",
        ...     batch_size=1000,
        ...     projection={"_id": False},
        ... )
        >>>
        >>> spec = ReadSpec(entity_id=account_id, position=First(), count=None)
        >>> source.build_query(spec)
        MongoQuery(filter={'account_id': ...}, sort=[('booked_at', 1)], limit=None)
    """

    def __init__(
        self,
        collection: AsyncCollection[dict[str, Any]],
        id_field: str,
        versioning_key: str,
        batch_size: int | None = None,
        projection: dict[str, Any] | None = None,
        to_record: Callable[[dict[str, Any]], Any] | None = None,
    ) -> None:
        """Initialize the reader.

        Args:
            collection: Collection holding the records.
            id_field: Field identifying the entity of a document.
            versioning_key: Field ordering the documents of an entity.
            batch_size: Documents fetched per round trip while streaming.
            projection: Optional projection applied to every query.
            to_record: Optional conversion applied to each document before it
                is returned.
        """
        self._collection = collection
        self.id_field = id_field
        self.versioning_key = versioning_key
        self.batch_size = batch_size
        self.projection = projection
        self._to_record = to_record

    def build_query(self, spec: ReadSpec) -> MongoQuery:
        """Build the ``find`` query answering ``spec``.

        Raises:
            UnknownPositionError: If ``spec.position`` is not a known position.
        """
        position = spec.position
        bounds: dict[str, Any] = {}

        if isinstance(position, After):
            _narrow(bounds, "$gt", position.version)
        elif isinstance(position, Before):
            _narrow(bounds, "$lt", position.version)
        elif not isinstance(position, (First, Last)):
            raise UnknownPositionError(position)

        if spec.until is not None:
            _narrow(bounds, "$lt", spec.until)
        if spec.through is not None:
            _narrow(bounds, "$lte", spec.through)

        filter_query: dict[str, Any] = {self.id_field: spec.entity_id}
        if bounds:
            filter_query[self.versioning_key] = bounds

        direction = DESCENDING if isinstance(position, Last) else ASCENDING
        return MongoQuery(
            filter=filter_query,
            sort=[(self.versioning_key, direction)],
            limit=None if spec.is_unbounded else spec.count,
        )

    def _find(self, query: MongoQuery, **kwargs: Any) -> AsyncCursor[dict[str, Any]]:
        if self.projection is not None:
            kwargs["projection"] = self.projection
        if query.limit is not None:
            kwargs["limit"] = query.limit
        return self._collection.find(query.filter, sort=query.sort, **kwargs)

    def _convert(self, document: dict[str, Any]) -> Any:
        if self._to_record is None:
            return document
        return self._to_record(document)

    async def _records(self, cursor: AsyncCursor[dict[str, Any]]) -> AsyncIterator[Any]:
        async for document in cursor:
            yield self._convert(document)

    async def read(self, spec: ReadSpec) -> list[Any]:
        query = self.build_query(spec)
        if query.is_empty:
            return []

        cursor = self._find(query)
        try:
            return [self._convert(document) async for document in cursor]
        finally:
            await cursor.close()

    async def stream(self, spec: ReadSpec, consumer: Consumer[T]) -> T:
        query = self.build_query(spec)
        if query.is_empty:
            return await consumer(iterate(()))

        kwargs: dict[str, Any] = {}
        if self.batch_size is not None:
            kwargs["batch_size"] = self.batch_size

        client = self._collection.database.client
        async with client.start_session() as session:
            cursor = self._find(query, session=session, **kwargs)
            LOGGER.debug(
                "Streaming records",
                extra={"collection": self._collection.name, "query_filter": str(query.filter)},
            )
            try:
                return await consumer(self._records(cursor))
            finally:
                await cursor.close()
