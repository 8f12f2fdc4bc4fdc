from .todos import TodoReducer, Todos

__all__ = ["TodoReducer", "Todos"]
