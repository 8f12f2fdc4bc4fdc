"""Unit tests for MongoConfiguration."""

import pytest
from pydantic import ValidationError

from vantage.integrations.mongodb import MongoConfiguration


def test_config_with_defaults():
    """Test config creation with default values."""
    config = MongoConfiguration()

    assert config.uri == "mongodb://localhost:27017"
    assert config.database == "vantage"
    assert config.max_pool_size == 100
    assert config.server_selection_timeout_ms == 30000
    assert config.snapshots_collection == "snapshots"
    assert config.snapshot_mode == "multiple"
    assert config.batch_size is None


def test_config_from_environment(monkeypatch: pytest.MonkeyPatch):
    """Test that settings are read from VANTAGE_MONGO_ variables."""
    monkeypatch.setenv("VANTAGE_MONGO_URI", "mongodb://db.internal:27017")
    monkeypatch.setenv("VANTAGE_MONGO_DATABASE", "bank")
    monkeypatch.setenv("VANTAGE_MONGO_SNAPSHOT_MODE", "single")
    monkeypatch.setenv("VANTAGE_MONGO_BATCH_SIZE", "250")

    config = MongoConfiguration()

    assert config.uri == "mongodb://db.internal:27017"
    assert config.database == "bank"
    assert config.snapshot_mode == "single"
    assert config.batch_size == 250


def test_config_validation_max_pool_size():
    """Test that max_pool_size must be at least 1."""
    with pytest.raises(ValidationError):
        MongoConfiguration(max_pool_size=0)


def test_config_validation_batch_size():
    """Test that batch_size must be positive when given."""
    with pytest.raises(ValidationError):
        MongoConfiguration(batch_size=0)


def test_config_validation_snapshot_mode():
    """Test that only known snapshot modes are accepted."""
    with pytest.raises(ValidationError):
        MongoConfiguration(snapshot_mode="latest")


@pytest.mark.asyncio
async def test_collections_come_from_configured_database():
    """Test the collection factories without connecting."""
    config = MongoConfiguration(database="bank", snapshots_collection="balance_snapshots")

    assert config.db.name == "bank"
    assert config.snapshots.name == "balance_snapshots"
    assert config.collection("transactions").name == "transactions"
    assert config.client is config.client

    await config.on_shutdown()


@pytest.mark.asyncio
async def test_shutdown_without_client_is_noop():
    """Test that shutting down never creates a client."""
    config = MongoConfiguration()

    await config.on_shutdown()

    assert "client" not in config.__dict__
