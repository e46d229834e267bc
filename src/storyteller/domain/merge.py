"""Unknown-field merge — overlay known keys without losing the rest.

Schema-agnostic counterpart to :mod:`storyteller.domain.builder`.
Every key of the existing record survives unless the caller asks for
its removal by passing :data:`UNSET`. Empty strings and ``None`` are
ordinary values here; only the builder treats them specially.
"""

from __future__ import annotations

import copy
from typing import Any, Final

# Host-injected metadata key (source position info) never written back.
POSITION_KEY: Final = "position"


class _Unset:
    """Marker type for "remove this key"."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()


def strip_position(value: Any) -> Any:
    """Return *value* with every ``position`` key removed, at any depth."""
    if isinstance(value, dict):
        return {k: strip_position(v) for k, v in value.items() if k != POSITION_KEY}
    if isinstance(value, list):
        return [strip_position(v) for v in value]
    return value


def merge_known_into_existing(
    existing: dict[str, Any] | None,
    known: dict[str, Any],
) -> dict[str, Any]:
    """Merge *known* over a copy of *existing*.

    - Keys only in *existing* keep their value and position.
    - Keys in *known* overwrite in place, or are appended when new.
    - A *known* value of :data:`UNSET` deletes the key.
    - ``position`` is always dropped from the top level.

    Neither argument is modified.
    """
    merged: dict[str, Any] = copy.deepcopy(existing) if isinstance(existing, dict) else {}
    for key, value in known.items():
        if value is UNSET:
            merged.pop(key, None)
        else:
            merged[key] = copy.deepcopy(value)
    merged.pop(POSITION_KEY, None)
    return merged
