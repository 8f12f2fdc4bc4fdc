"""Vantage - projections built by reducing ordered record streams.

This module provides the public API:

- Store: runs a reducer over the records supplied by a reader
- Reducer: defines how a projection is built from records
- Reader: supplier of records and snapshots
- Window: decides which values of a projection are returned
"""

from .exceptions import (
    ConfigurationError,
    SnapshotContractError,
    StubExhaustedError,
    UnknownDecisionError,
    UnknownPositionError,
    VantageError,
)
from .projections import FunctionReducer, Reducer
from .reading import After, Before, First, InMemoryReader, Last, Reader, ReadSpec
from .snapshots import Snapshot
from .store import Store, StoreConfiguration
from .windows import Continue, Emit, EmitAdjusted, PassThrough, TriggerWindow, Window

__all__ = [
    # Store
    "Store",
    "StoreConfiguration",
    # Projections
    "Reducer",
    "FunctionReducer",
    # Reading
    "Reader",
    "InMemoryReader",
    "ReadSpec",
    "First",
    "Last",
    "After",
    "Before",
    "Snapshot",
    # Windows
    "Window",
    "PassThrough",
    "TriggerWindow",
    "Emit",
    "EmitAdjusted",
    "Continue",
    # Errors
    "VantageError",
    "ConfigurationError",
    "SnapshotContractError",
    "UnknownPositionError",
    "UnknownDecisionError",
    "StubExhaustedError",
]
