from .reader import StubReader
from .scenario import ProjectionScenario

__all__ = [
    "StubReader",
    "ProjectionScenario",
]
