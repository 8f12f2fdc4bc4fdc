"""Resolve projection state types stored alongside snapshot documents."""

import importlib
from functools import lru_cache
from typing import Any


def get_qualified_name(cls: type) -> str:
    """Return ``module.QualName`` for ``cls``.

    Example:
        >>> from vantage.snapshots import Snapshot
        >>> get_qualified_name(Snapshot)
        'vantage.snapshots.Snapshot'
    """
    return f"{cls.__module__}.{cls.__qualname__}"


@lru_cache(maxsize=256)
def load_type(qualified_name: str) -> type[Any]:
    """Import the type named by ``get_qualified_name``.

    Nested classes are resolved attribute by attribute, so a state model
    declared inside another class round-trips as well.

    Raises:
        ImportError: If no importable module prefix holds such a type.
    """
    parts = qualified_name.split(".")
    if len(parts) < 2:
        raise ImportError(f"Invalid qualified name: {qualified_name}")

    # Try the longest importable module prefix first.
    for split in range(len(parts) - 1, 0, -1):
        try:
            target: Any = importlib.import_module(".".join(parts[:split]))
        except ImportError:
            continue
        for attribute in parts[split:]:
            target = getattr(target, attribute, None)
            if target is None:
                raise ImportError(f"Cannot load type '{qualified_name}'")
        return target  # type: ignore[no-any-return]

    raise ImportError(f"Cannot load type '{qualified_name}'")
