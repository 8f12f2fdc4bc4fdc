from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar

TRecord = TypeVar("TRecord")
TState = TypeVar("TState")


class Reducer(ABC, Generic[TRecord, TState]):
    """Defines how a projection is built from a stream of records.

    A reducer is a pair of functions: ``init`` produces the zero state used
    when there is no snapshot to start from, and ``project`` folds a single
    record into an existing state, returning the new state.

    ``project`` must be pure and must not mutate the state it receives. The
    same state may be handed to a trigger callback and kept as an emitted
    window value, so in-place changes would leak into results.

    Examples:
        A reducer that sums transactions into an available balance:

        >>> class AvailableBalance(Reducer[Transaction, Decimal]):
        ...     def init(self) -> Decimal:
        ...         return Decimal("0")
        ...
        ...     def project(self, record: Transaction, state: Decimal) -> Decimal:
        ...         return state + record.amount

        The same reducer built from plain functions:

        >>> balance = Reducer.from_functions(
        ...     lambda: Decimal("0"),
        ...     lambda record, state: state + record.amount,
        ... )
    """

    @staticmethod
    def from_functions(
        init: Callable[[], Any], project: Callable[[Any, Any], Any]
    ) -> "FunctionReducer":
        return FunctionReducer(init, project)

    @abstractmethod
    def init(self) -> TState:
        """Create the zero state of the projection."""
        ...

    @abstractmethod
    def project(self, record: TRecord, state: TState) -> TState:
        """Fold ``record`` into ``state`` and return the resulting state."""
        ...


class FunctionReducer(Reducer[Any, Any]):
    """Reducer assembled from an init callable and a project callable."""

    def __init__(
        self, init: Callable[[], Any], project: Callable[[Any, Any], Any]
    ) -> None:
        self._init = init
        self._project = project

    def init(self) -> Any:
        return self._init()

    def project(self, record: Any, state: Any) -> Any:
        return self._project(record, state)
