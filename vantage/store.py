"""Stores answer "what is the projection of entity X" requests.

A store joins a reducer with a source reader and, optionally, a snapshot
reader. When a snapshot reader is configured the store looks up the newest
usable snapshot and only streams the records that follow it. Without one, or
when the entity has no snapshot yet, it streams the entity's records from the
first one and folds them into the reducer's zero state.
"""

import logging
from dataclasses import dataclass
from typing import Any

from .exceptions import ConfigurationError, SnapshotContractError
from .projections import Reducer
from .reading import After, Before, First, Last, Reader, ReadSpec
from .snapshots import version_and_data
from .windows import PassThrough, Window

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreConfiguration:
    """Immutable configuration of a store.

    Built once and shared by reference between any number of concurrent
    ``Store.get`` calls.

    Attributes:
        reducer: Reducer defining the projection.
        source: Reader supplying the records the projection is built from.
        snapshot: Optional reader supplying snapshots of the projection.
    """

    reducer: Reducer[Any, Any]
    source: Reader
    snapshot: Reader | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.reducer, Reducer):
            raise ConfigurationError(f"reducer must be a Reducer, got {self.reducer!r}")
        if not isinstance(self.source, Reader):
            raise ConfigurationError(f"source must be a Reader, got {self.source!r}")
        if self.snapshot is not None and not isinstance(self.snapshot, Reader):
            raise ConfigurationError(f"snapshot must be a Reader, got {self.snapshot!r}")


class Store:
    """Runs a projection over the records supplied by a reader.

    Examples:
        >>> store = Store(
        ...     reducer=AvailableBalance(),
        ...     source=MongoReader(
        ...         config.collection("transactions"),
        ...         id_field="account_id",
        ...         versioning_key="booked_at",
        ...     ),
        ...     snapshot=MongoSnapshotStorage(config),
        ... )
        >>>
        >>> balance = await store.get(account_id)
        >>> balance_at_year_end = await store.get(account_id, through=year_end)
        >>> *month_ends, current = await store.get(account_id, window=month_end_window)
    """

    def __init__(
        self,
        reducer: Reducer[Any, Any],
        source: Reader,
        snapshot: Reader | None = None,
    ) -> None:
        self.config = StoreConfiguration(reducer=reducer, source=source, snapshot=snapshot)

    @classmethod
    def from_config(cls, config: StoreConfiguration) -> "Store":
        return cls(config.reducer, config.source, config.snapshot)

    async def get(
        self,
        entity_id: Any,
        *,
        window: Window | None = None,
        until: Any | None = None,
        through: Any | None = None,
    ) -> Any:
        """Build the projection of ``entity_id``.

        Args:
            entity_id: Identity of the entity to project.
            window: Window used to materialize the projection. Defaults to
                ``PassThrough``, returning the final projection only.
            until: Only fold records with a version strictly below this.
            through: Only fold records with a version at or below this.

        Returns:
            The final projection for ``PassThrough``; for a ``TriggerWindow``
            the emitted values followed by the final projection.

        Raises:
            SnapshotContractError: If the snapshot reader returns more than
                one snapshot.
            ConfigurationError: If ``window`` is not a Window, or if the
                snapshot has no version or no data.

        Errors raised by readers, the reducer or a trigger propagate
        unchanged.
        """
        if window is None:
            window = PassThrough()
        elif not isinstance(window, Window):
            raise ConfigurationError(f"window must be a Window, got {window!r}")

        if self.config.snapshot is None:
            return await self._from_first(entity_id, window, until, through)

        # Any snapshot strictly before the bound is a safe baseline, the
        # records between it and the bound are folded on top.
        if until is not None:
            bound: Before | Last = Before(version=until)
        elif through is not None:
            bound = Before(version=through)
        else:
            bound = Last()

        snapshots = await self.config.snapshot.read(
            ReadSpec(entity_id=entity_id, position=bound, count=1)
        )

        if not snapshots:
            LOGGER.debug("No snapshot found", extra={"entity_id": str(entity_id)})
            return await self._from_first(entity_id, window, until, through)

        if len(snapshots) > 1:
            LOGGER.error(
                "Snapshot reader returned more than one snapshot",
                extra={"entity_id": str(entity_id), "count": len(snapshots)},
            )
            raise SnapshotContractError(entity_id, len(snapshots))

        try:
            version, data = version_and_data(snapshots[0])
        except ConfigurationError:
            LOGGER.error(
                "Snapshot reader returned an unusable snapshot",
                extra={"entity_id": str(entity_id)},
            )
            raise
        LOGGER.debug(
            "Building projection from snapshot",
            extra={"entity_id": str(entity_id), "snapshot_version": str(version)},
        )
        spec = ReadSpec(
            entity_id=entity_id,
            position=After(version=version),
            count=None,
            until=until,
            through=through,
        )
        return await self._materialize(spec, window, data)

    async def _from_first(
        self, entity_id: Any, window: Window, until: Any | None, through: Any | None
    ) -> Any:
        spec = ReadSpec(
            entity_id=entity_id,
            position=First(),
            count=None,
            until=until,
            through=through,
        )
        return await self._materialize(spec, window, self.config.reducer.init())

    async def _materialize(self, spec: ReadSpec, window: Window, baseline: Any) -> Any:
        reducer = self.config.reducer

        async def consume(records):
            return await window.materialize(records, reducer, baseline)

        LOGGER.debug(
            "Materializing projection",
            extra={"entity_id": str(spec.entity_id), "window": repr(window)},
        )
        return await self.config.source.stream(spec, consume)
