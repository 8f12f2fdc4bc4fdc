"""MongoDB integration for vantage.

This module provides a MongoDB implementation of the Reader interface for
data sources, and MongoDB snapshot storage usable as a store's snapshot
reader, using PyMongo's native async driver.

Installation:
    pip install vantage[mongodb]

Usage:
    >>> from vantage import Store
    >>> from vantage.integrations.mongodb import (
    ...     MongoConfiguration,
    ...     MongoReader,
    ...     MongoSnapshotStorage,
    ... )
    >>>
    >>> config = MongoConfiguration(uri="mongodb://localhost:27017", database="bank")
    >>>
    >>> source = MongoReader(
    ...     config.collection("transactions"),
    ...     id_field="account_id",
    ...     versioning_key="booked_at",
    ... )
    >>> snapshots = MongoSnapshotStorage(config)
    >>>
    >>> store = Store(AvailableBalance(), source, snapshot=snapshots)
    >>> balance = await store.get(account_id)
"""

try:
    import pymongo  # noqa: F401
except ImportError as err:
    raise ImportError(
        "pymongo package is required for MongoDB integration. "
        "Install it with: pip install vantage[mongodb]"
    ) from err

from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration
from .reader import MongoQuery, MongoReader
from .snapshot_storage import MongoSnapshotStorage, SnapshotDocument
from .type_loader import get_qualified_name, load_type

__all__ = [
    "MongoConfiguration",
    "MongoReader",
    "MongoQuery",
    "MongoSnapshotStorage",
    "SnapshotDocument",
    "IndexedCollection",
    "IndexSpec",
    "IndexDirection",
    "get_qualified_name",
    "load_type",
]
