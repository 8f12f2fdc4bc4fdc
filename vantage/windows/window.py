from abc import ABC, abstractmethod
from collections.abc import AsyncIterable
from typing import TYPE_CHECKING, Any

from ..projections import Reducer

if TYPE_CHECKING:
    from .trigger import Trigger, TriggerWindow


class Window(ABC):
    """Strategy for extracting values from a projection while it is built.

    A store hands every window the ordered records of one entity, the reducer
    and the baseline state to fold from. The window decides what the caller
    gets back: the final state only, or intermediate values as well.

    Windows are configured by the caller per request and must not keep any
    state between ``materialize`` calls.
    """

    @staticmethod
    def pass_through() -> "PassThrough":
        """The default window: returns only the final projection."""
        return PassThrough()

    @staticmethod
    def trigger(window_state: Any, trigger: "Trigger") -> "TriggerWindow":
        """A window whose emissions are decided by ``trigger``."""
        from .trigger import TriggerWindow

        return TriggerWindow(window_state, trigger)

    @abstractmethod
    async def materialize(
        self,
        records: AsyncIterable[Any],
        reducer: Reducer[Any, Any],
        baseline: Any,
    ) -> Any:
        """Fold ``records`` into ``baseline`` using ``reducer``.

        Args:
            records: The entity's records in stream order.
            reducer: Reducer defining the projection.
            baseline: State to start folding from (zero state or snapshot).

        Returns:
            The window's result, see the concrete implementations.
        """
        ...


class PassThrough(Window):
    """Collects the entire stream into a single projection value.

    Every record is folded in order and only the final state is returned,
    never a list.
    """

    async def materialize(
        self,
        records: AsyncIterable[Any],
        reducer: Reducer[Any, Any],
        baseline: Any,
    ) -> Any:
        state = baseline
        async for record in records:
            state = reducer.project(record, state)
        return state

    def __repr__(self) -> str:
        return "PassThrough()"
