from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from .spec import ReadSpec

if TYPE_CHECKING:
    from .memory import InMemoryReader, KeyExtractor

T = TypeVar("T")

Consumer = Callable[[AsyncIterator[Any]], Awaitable[T]]
"""Async callable receiving a record iterator; its result becomes the stream result."""


class Reader(ABC):
    """Supplier of ordered records for projections and snapshot lookups.

    Stores use readers twice: once to look up the newest usable snapshot of an
    entity, and once to stream the records that must be folded on top of it.
    Anything that can hold ordered records per entity can act as a reader by
    implementing this interface.

    Every implementation must honour the ordering and bound semantics
    documented on ``ReadSpec``. Returning records out of order, or ignoring
    ``until``/``through``, silently corrupts projections.
    """

    @staticmethod
    def in_memory(
        records: Iterable[Any] = (),
        id_key: "KeyExtractor" = "entity_id",
        versioning_key: "KeyExtractor" = "version",
    ) -> "InMemoryReader":
        """A reader serving records held in a Python list."""
        from .memory import InMemoryReader

        return InMemoryReader(records, id_key=id_key, versioning_key=versioning_key)

    @abstractmethod
    async def read(self, spec: ReadSpec) -> list[Any]:
        """Eagerly read the records described by ``spec``.

        Used for snapshot lookups, where at most a handful of records are
        expected.

        Args:
            spec: The slice of the entity's stream to read.

        Returns:
            The matching records in the order mandated by ``spec.position``.
        """
        ...

    @abstractmethod
    async def stream(self, spec: ReadSpec, consumer: Consumer[T]) -> T:
        """Lazily read the records described by ``spec`` and hand them to ``consumer``.

        Implementations acquire whatever resource backs the stream (cursor,
        session, transaction) before calling ``consumer`` and release it on
        every exit path, including when ``consumer`` raises. The records are
        only valid while ``consumer`` runs.

        Args:
            spec: The slice of the entity's stream to read.
            consumer: Async callable that receives an async iterator over the
                records and returns the result of the call.

        Returns:
            Whatever ``consumer`` returned.
        """
        ...
