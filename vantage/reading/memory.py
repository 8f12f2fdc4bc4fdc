"""In-memory reader implementation.

Useful for tests and for small, already-loaded record sets. Not intended for
production use: records live in a plain Python list and every read scans it.
"""

from collections.abc import AsyncIterator, Callable, Iterable, Mapping
from typing import Any

from ..exceptions import UnknownPositionError
from .reader import Consumer, Reader, T
from .spec import After, Before, First, Last, ReadSpec

KeyExtractor = str | Callable[[Any], Any]
"""Either a field name (mapping key or attribute) or a callable taking a record."""


def key_extractor(key: KeyExtractor) -> Callable[[Any], Any]:
    """Turn a field name or callable into a callable that extracts the value.

    Field names are looked up as mapping keys on mappings and as attributes
    on anything else.

    Example:
        >>> version_of = key_extractor("version")
        >>> version_of({"version": 3})
        3
    """
    if callable(key):
        return key

    def extract(record: Any) -> Any:
        if isinstance(record, Mapping):
            return record[key]
        return getattr(record, key)

    return extract


async def iterate(records: Iterable[Any]) -> AsyncIterator[Any]:
    """Expose an iterable as an async iterator."""
    for record in records:
        yield record


def apply_read_spec(
    records: Iterable[Any],
    spec: ReadSpec,
    id_of: Callable[[Any], Any],
    version_of: Callable[[Any], Any],
) -> list[Any]:
    """Select, order and limit ``records`` exactly as ``spec`` describes.

    Args:
        records: Candidate records, in any order and for any entity.
        spec: The read to apply.
        id_of: Returns the entity identity of a record.
        version_of: Returns the version of a record.

    Returns:
        The matching records, ascending by version (descending for ``Last``),
        truncated to ``spec.count``.

    Raises:
        UnknownPositionError: If ``spec.position`` is not a known position.
    """
    position = spec.position
    selected = [record for record in records if id_of(record) == spec.entity_id]

    if isinstance(position, After):
        selected = [r for r in selected if version_of(r) > position.version]
    elif isinstance(position, Before):
        selected = [r for r in selected if version_of(r) < position.version]
    elif not isinstance(position, (First, Last)):
        raise UnknownPositionError(position)

    if spec.until is not None:
        selected = [r for r in selected if version_of(r) < spec.until]
    if spec.through is not None:
        selected = [r for r in selected if version_of(r) <= spec.through]

    selected.sort(key=version_of, reverse=isinstance(position, Last))

    if not spec.is_unbounded:
        selected = selected[: spec.count]
    return selected


class InMemoryReader(Reader):
    """A reader that serves records held in memory.

    Records may be mappings or objects; ``id_key`` and ``versioning_key``
    name the fields (or provide callables) used to find an entity's records
    and to put them in order.

    Example:
        >>> reader = InMemoryReader(
        ...     [
        ...         {"account_id": 1, "version": 1, "amount": 10},
        ...         {"account_id": 1, "version": 2, "amount": 5},
        ...     ],
        ...     id_key="account_id",
        ...     versioning_key="version",
        ... )
        >>> await reader.read(ReadSpec(entity_id=1, position=Last(), count=1))
        [{'account_id': 1, 'version': 2, 'amount': 5}]
    """

    def __init__(
        self,
        records: Iterable[Any] = (),
        id_key: KeyExtractor = "entity_id",
        versioning_key: KeyExtractor = "version",
    ) -> None:
        self.records: list[Any] = list(records)
        self._id_of = key_extractor(id_key)
        self._version_of = key_extractor(versioning_key)

    def append(self, *records: Any) -> None:
        self.records.extend(records)

    def _select(self, spec: ReadSpec) -> list[Any]:
        return apply_read_spec(self.records, spec, self._id_of, self._version_of)

    async def read(self, spec: ReadSpec) -> list[Any]:
        return self._select(spec)

    async def stream(self, spec: ReadSpec, consumer: Consumer[T]) -> T:
        # Selecting up front detaches the stream from later appends.
        return await consumer(iterate(self._select(spec)))
