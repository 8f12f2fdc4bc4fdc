"""Pytest fixtures for MongoDB integration tests."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Literal

import pytest
import pytest_asyncio

from vantage.integrations.mongodb import MongoConfiguration, MongoReader, MongoSnapshotStorage

# Assumes a MongoDB container is running locally on port 27017
LOCAL_MONGO_URI = "mongodb://localhost:27017"


@asynccontextmanager
async def create_config(
    request: pytest.FixtureRequest,
    prefix: str = "test",
    snapshot_mode: Literal["single", "multiple"] = "multiple",
) -> AsyncIterator[MongoConfiguration]:
    """Create a MongoConfiguration with cleanup."""
    db_name = f"{prefix}_{request.node.name}"[:63]
    config = MongoConfiguration(
        uri=LOCAL_MONGO_URI,
        database=db_name,
        snapshot_mode=snapshot_mode,
    )
    await config.client.drop_database(config.database)
    try:
        yield config
    finally:
        await config.on_shutdown()


@pytest_asyncio.fixture
async def mongo_config(request: pytest.FixtureRequest) -> AsyncIterator[MongoConfiguration]:
    """Create a MongoConfiguration pointing to local MongoDB."""
    async with create_config(request) as config:
        yield config


@pytest_asyncio.fixture
async def mongo_config_single_snapshot(
    request: pytest.FixtureRequest,
) -> AsyncIterator[MongoConfiguration]:
    """Create a MongoConfiguration with single snapshot mode."""
    async with create_config(request, prefix="test_s", snapshot_mode="single") as config:
        yield config


@pytest_asyncio.fixture
async def mongo_config_multiple_snapshot(
    request: pytest.FixtureRequest,
) -> AsyncIterator[MongoConfiguration]:
    """Create a MongoConfiguration with multiple snapshot mode."""
    async with create_config(request, prefix="test_m", snapshot_mode="multiple") as config:
        yield config


@pytest_asyncio.fixture
async def transactions(
    mongo_config: MongoConfiguration, bank_records: list[dict]
) -> MongoReader:
    """Insert the bank records and return a reader over them."""
    collection = mongo_config.collection("transactions")
    await collection.insert_many([dict(record) for record in bank_records])
    return MongoReader(
        collection,
        id_field="bank_account_id",
        versioning_key="version",
        projection={"_id": False},
    )


@pytest_asyncio.fixture
async def snapshot_storage(mongo_config: MongoConfiguration) -> MongoSnapshotStorage:
    """Create a MongoSnapshotStorage in multiple mode."""
    return MongoSnapshotStorage(mongo_config)
