"""Frontmatter builder — rebuild an entity's frontmatter for saving.

The prior on-disk frontmatter is the starting point, so keys the
application knows nothing about survive every save. Entity values are
then laid over it, restricted to the kind's whitelist plus any extra
keys the caller allows.

INVARIANT (preservation): A key present in the prior frontmatter is
still present after a rebuild, even when the entity's new value is
empty.

INVARIANT (non-pollution): A key absent from the prior frontmatter whose
new value is empty is never written.

INVARIANT (ordering): Prior keys keep their relative order; new keys
follow in the order the entity declares them.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from storyteller.domain.merge import strip_position
from storyteller.domain.schema import CUSTOM_FIELDS_KEY, INTERNAL_KEYS, get_schema
from storyteller.domain.types import CustomFieldsMode, EntityKind

logger = logging.getLogger(__name__)


def is_empty_value(value: Any) -> bool:
    """True for ``None``, ``""``, and empty lists or mappings."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _candidate_order(
    seeded: Iterable[str],
    entity_fields: Mapping[str, Any],
    custom: Mapping[str, Any],
    mode: CustomFieldsMode,
) -> list[str]:
    """Seeded keys first, then entity keys with flattened custom fields inline."""
    order: dict[str, None] = dict.fromkeys(seeded)
    for key in entity_fields:
        if key == CUSTOM_FIELDS_KEY and mode is CustomFieldsMode.FLATTEN:
            order.update(dict.fromkeys(k for k in custom if k not in order))
        elif key not in order:
            order[key] = None
    return list(order)


def build_frontmatter(
    kind: str | EntityKind,
    entity_fields: Mapping[str, Any],
    extra_allowed_keys: Iterable[str] | None = None,
    *,
    custom_fields_mode: str | CustomFieldsMode | None = None,
    original_frontmatter: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the frontmatter record to write for an entity.

    Args:
        kind: Entity kind selecting the static whitelist. Unknown kinds
            get an empty whitelist.
        entity_fields: The entity as edited, including an optional
            ``customFields`` mapping.
        extra_allowed_keys: Keys allowed in addition to the whitelist.
        custom_fields_mode: ``flatten`` writes each custom field as a
            top-level key; ``nested`` writes the whole mapping under
            ``customFields``. Defaults to the kind's schema setting.
        original_frontmatter: Frontmatter currently on disk, if any.
            Never modified.

    Returns:
        A new ordered dict. Long-form keys of the kind are never written
        from the entity, and ``position`` is removed at every depth.

    Raises:
        TypeError: If *entity_fields* is not a mapping.
    """
    if not isinstance(entity_fields, Mapping):
        msg = f"entity_fields must be a mapping, got {type(entity_fields).__name__}"
        raise TypeError(msg)

    schema = get_schema(kind)
    if not schema.fields:
        logger.debug("Unknown entity kind %r; using an empty whitelist", kind)
    mode = CustomFieldsMode(custom_fields_mode or schema.custom_fields_mode)

    seed = dict(original_frontmatter) if isinstance(original_frontmatter, Mapping) else {}
    result: dict[str, Any] = copy.deepcopy(seed)
    seeded = frozenset(result)

    raw_custom = entity_fields.get(CUSTOM_FIELDS_KEY)
    custom: Mapping[str, Any] = raw_custom if isinstance(raw_custom, Mapping) else {}

    allowed = set(schema.whitelist)
    allowed.update(extra_allowed_keys or ())
    if mode is CustomFieldsMode.FLATTEN:
        allowed.update(custom)
        allowed.discard(CUSTOM_FIELDS_KEY)
    else:
        allowed.add(CUSTOM_FIELDS_KEY)

    def lookup(key: str) -> tuple[bool, Any]:
        if key == CUSTOM_FIELDS_KEY:
            if mode is CustomFieldsMode.NESTED and key in entity_fields:
                return True, entity_fields[key]
            return False, None
        if key in entity_fields:
            return True, entity_fields[key]
        if mode is CustomFieldsMode.FLATTEN and key in custom:
            return True, custom[key]
        return False, None

    for key in _candidate_order(seeded, entity_fields, custom, mode):
        if key in INTERNAL_KEYS or key in schema.section_keys:
            continue
        if key not in seeded and key not in allowed:
            continue
        provided, value = lookup(key)
        if not provided:
            continue
        if key in seeded or not is_empty_value(value):
            result[key] = copy.deepcopy(value)

    return strip_position(result)
