"""Projection reducers."""

from .reducer import FunctionReducer, Reducer

__all__ = ["Reducer", "FunctionReducer"]
