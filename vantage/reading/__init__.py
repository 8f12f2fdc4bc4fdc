"""Readers supply the ordered records that projections are built from.

- ReadSpec: immutable description of which records to read
- First, Last, After, Before: read positions
- Reader: abstract base class every source and snapshot adapter implements
- InMemoryReader: list-backed reader for tests and small data sets
"""

from .memory import InMemoryReader, apply_read_spec, iterate, key_extractor
from .reader import Consumer, Reader
from .spec import After, Before, First, Last, Position, ReadSpec

__all__ = [
    "ReadSpec",
    "Position",
    "First",
    "Last",
    "After",
    "Before",
    "Reader",
    "Consumer",
    "InMemoryReader",
    "apply_read_spec",
    "iterate",
    "key_extractor",
]
