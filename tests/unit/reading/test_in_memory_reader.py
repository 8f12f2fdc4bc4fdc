"""Tests for InMemoryReader ordering and bound semantics."""

import pytest

from vantage import ConfigurationError
from vantage.reading import (
    After,
    Before,
    First,
    InMemoryReader,
    Last,
    Reader,
    ReadSpec,
    apply_read_spec,
)


@pytest.fixture
def reader(bank_records) -> InMemoryReader:
    """Create an in-memory reader over two bank accounts."""
    return InMemoryReader(bank_records, id_key="bank_account_id", versioning_key="version")


def versions(records):
    return [record["version"] for record in records]


@pytest.mark.asyncio
async def test_reading_from_first_position(reader):
    """Test that First returns an entity's records in ascending order."""
    records = await reader.read(ReadSpec(entity_id=1, position=First(), count=None))
    assert [r["amount"] for r in records] == [10.0, 5.0, 2.0]

    records = await reader.read(ReadSpec(entity_id=2, position=First(), count=None))
    assert [r["amount"] for r in records] == [20.0, 7.0, 4.0]


@pytest.mark.asyncio
async def test_reading_from_last_position(reader):
    """Test that Last returns the newest records in descending order."""
    records = await reader.read(ReadSpec(entity_id=1, position=Last(), count=1))
    assert records == [{"amount": 2.0, "bank_account_id": 1, "version": 3}]

    records = await reader.read(ReadSpec(entity_id=2, position=Last(), count=2))
    assert versions(records) == [3, 2]


@pytest.mark.asyncio
async def test_reading_after_position(reader):
    """Test that After only returns strictly greater versions."""
    assert versions(await reader.read(ReadSpec(entity_id=1, position=After(version=0), count=None))) == [1, 2, 3]
    assert versions(await reader.read(ReadSpec(entity_id=1, position=After(version=1), count=None))) == [2, 3]
    assert versions(await reader.read(ReadSpec(entity_id=1, position=After(version=2), count=None))) == [3]
    assert await reader.read(ReadSpec(entity_id=1, position=After(version=3), count=None)) == []


@pytest.mark.asyncio
async def test_reading_before_position(reader):
    """Test that Before only returns strictly smaller versions, ascending."""
    assert await reader.read(ReadSpec(entity_id=1, position=Before(version=1), count=None)) == []
    assert versions(await reader.read(ReadSpec(entity_id=1, position=Before(version=2), count=None))) == [1]
    assert versions(await reader.read(ReadSpec(entity_id=1, position=Before(version=3), count=None))) == [1, 2]
    assert versions(await reader.read(ReadSpec(entity_id=1, position=Before(version=40), count=None))) == [1, 2, 3]


@pytest.mark.asyncio
async def test_reading_with_until(reader):
    """Test that until excludes the bound itself."""
    assert versions(await reader.read(ReadSpec(entity_id=2, position=First(), count=None, until=3))) == [1, 2]
    assert await reader.read(ReadSpec(entity_id=2, position=First(), count=None, until=1)) == []
    assert versions(await reader.read(ReadSpec(entity_id=2, position=First(), count=None, until=10))) == [1, 2, 3]


@pytest.mark.asyncio
async def test_reading_with_through(reader):
    """Test that through includes the bound itself."""
    assert versions(await reader.read(ReadSpec(entity_id=2, position=First(), count=None, through=2))) == [1, 2]
    assert versions(await reader.read(ReadSpec(entity_id=2, position=First(), count=None, through=10))) == [1, 2, 3]


@pytest.mark.asyncio
async def test_until_and_through_both_apply(reader):
    """Test that until and through narrow the result together."""
    spec = ReadSpec(entity_id=1, position=First(), count=None, until=3, through=1)
    assert versions(await reader.read(spec)) == [1]

    spec = ReadSpec(entity_id=1, position=First(), count=None, until=2, through=5)
    assert versions(await reader.read(spec)) == [1]


@pytest.mark.asyncio
async def test_last_respects_bounds(reader):
    """Test that Last picks the newest record inside the bounds."""
    spec = ReadSpec(entity_id=1, position=Last(), count=1, until=3)
    assert versions(await reader.read(spec)) == [2]


@pytest.mark.asyncio
async def test_count_applies_after_ordering(reader):
    """Test that count limits the ordered result."""
    assert versions(await reader.read(ReadSpec(entity_id=1, position=First(), count=2))) == [1, 2]
    assert await reader.read(ReadSpec(entity_id=1, position=First(), count=0)) == []


@pytest.mark.asyncio
async def test_unknown_entity_reads_nothing(reader):
    """Test reading an entity without records."""
    assert await reader.read(ReadSpec(entity_id=99, position=First(), count=None)) == []


@pytest.mark.asyncio
async def test_streaming_passes_async_iterator(reader):
    """Test that stream hands the consumer an async iterator and returns its result."""

    async def collect(records):
        assert hasattr(records, "__anext__")
        return [record async for record in records]

    spec = ReadSpec(entity_id=1, position=After(version=1), count=None)
    assert versions(await reader.stream(spec, collect)) == [2, 3]


@pytest.mark.asyncio
async def test_streaming_propagates_consumer_errors(reader):
    """Test that errors raised by the consumer reach the caller."""

    async def explode(records):
        raise RuntimeError("consumer failed")

    with pytest.raises(RuntimeError, match="consumer failed"):
        await reader.stream(ReadSpec(entity_id=1, position=First(), count=None), explode)


@pytest.mark.asyncio
async def test_append_and_callable_extractors():
    """Test callable key extractors and appending records."""

    class Record:
        def __init__(self, owner, seq):
            self.owner = owner
            self.seq = seq

    reader = Reader.in_memory(
        id_key=lambda r: r.owner, versioning_key=lambda r: r.seq
    )
    reader.append(Record("a", 2), Record("a", 1), Record("b", 1))

    records = await reader.read(ReadSpec(entity_id="a", position=First(), count=None))
    assert [r.seq for r in records] == [1, 2]


@pytest.mark.asyncio
async def test_attribute_extractors():
    """Test that field names are looked up as attributes on objects."""

    class Record:
        def __init__(self, entity_id, version):
            self.entity_id = entity_id
            self.version = version

    reader = InMemoryReader([Record(1, 5), Record(1, 4)])
    records = await reader.read(ReadSpec(entity_id=1, position=Last(), count=1))
    assert records[0].version == 5


def test_apply_read_spec_rejects_unknown_position():
    """Test that a position bypassing validation is a configuration error."""
    spec = ReadSpec.model_construct(entity_id=1, position="middle", count=None)

    with pytest.raises(ConfigurationError):
        apply_read_spec([], spec, lambda r: r, lambda r: r)
