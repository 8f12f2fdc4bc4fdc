"""Snapshots of previously computed projections.

A snapshot stores a projection state together with the version of the last
record folded into it. Stores use the newest usable snapshot as the baseline
and only fold the records that follow it.

How snapshots are persisted is up to the snapshot reader. The store only
relies on each snapshot exposing ``version`` and ``data``, either as
attributes or as mapping keys.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field
from ulid import ULID

from .exceptions import ConfigurationError


class Snapshot(BaseModel):
    """A projection state captured at a version of an entity's stream.

    Attributes:
        id: Unique identifier of this snapshot.
        entity_id: Identity of the entity the projection belongs to.
        version: Version of the last record folded into ``data``.
        data: The projection state.

    Example:
        >>> snapshot = Snapshot(entity_id=account_id, version=120, data=balance)
        >>> await snapshot_storage.save_snapshot(snapshot)
    """

    model_config = {"frozen": True}

    id: ULID = Field(default_factory=ULID, description="Unique identifier for this snapshot")
    entity_id: Any = Field(description="Identity of the entity the snapshot belongs to")
    version: Any = Field(description="Version of the last record folded into the data")
    data: Any = Field(description="The projection state")


_MISSING = object()


def version_and_data(snapshot: Any) -> tuple[Any, Any]:
    """Extract ``(version, data)`` from a snapshot record.

    Raises:
        ConfigurationError: If the snapshot has no ``data`` or no version
            (a missing or ``None`` ``version``). Records after an unknown
            version cannot be selected, so such a snapshot is unusable.
    """
    if isinstance(snapshot, Mapping):
        version = snapshot.get("version")
        data = snapshot.get("data", _MISSING)
    else:
        version = getattr(snapshot, "version", None)
        data = getattr(snapshot, "data", _MISSING)

    if data is _MISSING:
        raise ConfigurationError(f"Snapshot has no data: {snapshot!r}")
    if version is None:
        raise ConfigurationError(f"Snapshot has no version: {snapshot!r}")
    return version, data
