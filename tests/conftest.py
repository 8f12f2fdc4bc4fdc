"""Central test fixtures."""

import pytest

from tests.fixtures import TodoReducer
from vantage.testing import StubReader


@pytest.fixture
def todo_reducer() -> TodoReducer:
    """Create the todo counting reducer."""
    return TodoReducer()


@pytest.fixture
def source_reader() -> StubReader:
    """Create a stub reader acting as data source."""
    return StubReader()


@pytest.fixture
def snapshot_reader() -> StubReader:
    """Create a stub reader acting as snapshot reader."""
    return StubReader()


@pytest.fixture
def bank_records() -> list[dict]:
    """Transactions of two bank accounts, deliberately out of order."""
    return [
        {"amount": 2.0, "bank_account_id": 1, "version": 3},
        {"amount": 10.0, "bank_account_id": 1, "version": 1},
        {"amount": 20.0, "bank_account_id": 2, "version": 1},
        {"amount": 5.0, "bank_account_id": 1, "version": 2},
        {"amount": 4.0, "bank_account_id": 2, "version": 3},
        {"amount": 7.0, "bank_account_id": 2, "version": 2},
    ]
