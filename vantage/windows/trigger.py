"""Trigger-driven windows.

A trigger window lets the caller peek into a projection while it is being
built. Before each record is folded, a trigger callback receives:

1. the current record,
2. the projection **up to but not including** the current record,
3. the window state accumulator.

It answers with a decision:

- ``Emit(value, window_state)`` adds ``value`` to the result and folds the
  record into the unchanged projection.
- ``EmitAdjusted(value, state, window_state)`` adds ``value`` and folds the
  record into ``state`` instead, e.g. to reset totals at a period boundary.
- ``Continue(state)`` emits nothing and folds the record into ``state``.

The result is always a list of the emitted values followed by the final
projection, so it is never empty.

Example:
    Balance at every month end:

    >>> def at_month_end(transaction, balance, period_ends):
    ...     if period_ends and transaction.timestamp > period_ends[0]:
    ...         return Emit(balance, period_ends[1:])
    ...     return Continue(balance)
    >>>
    >>> window = Window.trigger(month_ends, at_month_end)
    >>> *month_end_balances, current = await store.get(account_id, window=window)
"""

from collections.abc import AsyncIterable, Callable
from dataclasses import dataclass
from typing import Any

from ..exceptions import UnknownDecisionError
from ..projections import Reducer
from .window import Window


@dataclass(frozen=True)
class Emit:
    """Emit ``value`` and keep folding into the unchanged projection.

    Attributes:
        value: The value appended to the window result.
        window_state: Window state carried to the next record.
    """

    value: Any
    window_state: Any


@dataclass(frozen=True)
class EmitAdjusted:
    """Emit ``value`` and fold the current record into ``state`` instead.

    Attributes:
        value: The value appended to the window result.
        state: Projection the current record is folded into.
        window_state: Window state carried to the next record.
    """

    value: Any
    state: Any
    window_state: Any


@dataclass(frozen=True)
class Continue:
    """Emit nothing and fold the current record into ``state``.

    ``state`` is normally the projection the trigger received.
    """

    state: Any


Decision = Emit | EmitAdjusted | Continue

Trigger = Callable[[Any, Any, Any], Decision]
"""Callback ``(record, state_before_record, window_state) -> Decision``."""


class TriggerWindow(Window):
    """A window that lets a trigger callback decide when to emit values.

    Attributes:
        window_state: Initial accumulator handed to the first trigger call.
        trigger: Decision callback, see the module documentation.
    """

    def __init__(self, window_state: Any, trigger: Trigger) -> None:
        self.window_state = window_state
        self.trigger = trigger

    async def materialize(
        self,
        records: AsyncIterable[Any],
        reducer: Reducer[Any, Any],
        baseline: Any,
    ) -> list[Any]:
        window_state = self.window_state
        emitted: list[Any] = []
        state = baseline

        async for record in records:
            decision = self.trigger(record, state, window_state)

            if isinstance(decision, Emit):
                emitted.append(decision.value)
                window_state = decision.window_state
            elif isinstance(decision, EmitAdjusted):
                emitted.append(decision.value)
                state = decision.state
                window_state = decision.window_state
            elif isinstance(decision, Continue):
                state = decision.state
            else:
                raise UnknownDecisionError(decision)

            state = reducer.project(record, state)

        emitted.append(state)
        return emitted

    def __repr__(self) -> str:
        return f"TriggerWindow(window_state={self.window_state!r})"
