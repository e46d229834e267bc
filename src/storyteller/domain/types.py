"""Entity kinds and classification enums.

These enums name the eight story entity kinds, the two custom-field
storage modes, the placement category of a schema field, and the
precision of a parsed date.
"""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Story entity kinds persisted as documents."""

    CHARACTER = "character"
    LOCATION = "location"
    EVENT = "event"
    ITEM = "item"
    REFERENCE = "reference"
    CHAPTER = "chapter"
    SCENE = "scene"
    GROUP = "group"


class CustomFieldsMode(StrEnum):
    """How user-defined fields are stored in frontmatter."""

    FLATTEN = "flatten"  # one top-level key per custom field
    NESTED = "nested"  # a single ``customFields`` mapping


class FieldCategory(StrEnum):
    """Where an entity field lives in the document."""

    DIRECT = "direct"  # frontmatter key
    SECTION = "section"  # ``## Heading`` body text


class DatePrecision(StrEnum):
    """Finest component a parsed date carries."""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    TIME = "time"
