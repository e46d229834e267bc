"""Safe file names for entity documents.

Only characters that common filesystems reject are removed. Names of
kinds that appear inside ``[[wiki links]]`` also lose the characters
that would break the link syntax. Collisions are the storage layer's
concern.
"""

from __future__ import annotations

import re

from storyteller.domain.schema import get_schema
from storyteller.domain.types import EntityKind

_ILLEGAL_CHARS = re.compile(r'[\\/:"*?<>|]+')
_ILLEGAL_LINK_CHARS = re.compile(r'[\\/:"*?<>|#^\[\]]+')


def to_safe_file_name(name: str, kind: str | EntityKind | None = None) -> str:
    """Strip filesystem-illegal characters from *name*.

    Examples:
        >>> to_safe_file_name("A:/B*C?")
        'ABC'
        >>> to_safe_file_name("Siege of #Kell [II]", "event")
        'Siege of Kell II'
        >>> to_safe_file_name("Zoë the Élan")
        'Zoë the Élan'
    """
    if kind is not None and get_schema(kind).link_safe_names:
        return _ILLEGAL_LINK_CHARS.sub("", name)
    return _ILLEGAL_CHARS.sub("", name)
