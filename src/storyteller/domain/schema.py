"""Per-kind entity schemas — which keys go to frontmatter, which to sections.

Each entity kind is described by a declarative table of
:class:`FieldSpec` entries instead of key-name literals scattered
through the builder. The frontmatter whitelist and the long-form
section keys are both derived from that table.

INVARIANT: An unknown kind resolves to an empty schema, never an error.
A save must not fail because a document carries an unrecognized kind.
"""

from __future__ import annotations

from pydantic import BaseModel

from storyteller.domain.types import CustomFieldsMode, EntityKind, FieldCategory

# Entity key holding user-defined fields.
CUSTOM_FIELDS_KEY = "customFields"

# Keys injected by the host application that are never serialized.
INTERNAL_KEYS: frozenset[str] = frozenset({"filePath", "position"})


class FieldSpec(BaseModel):
    """One entity field and where it is stored."""

    model_config = {"frozen": True}

    key: str
    category: FieldCategory = FieldCategory.DIRECT
    heading: str | None = None  # section heading for SECTION fields


class EntityKindSchema(BaseModel):
    """Static configuration for a single entity kind."""

    model_config = {"frozen": True}

    kind: str
    fields: tuple[FieldSpec, ...] = ()
    custom_fields_mode: CustomFieldsMode = CustomFieldsMode.FLATTEN
    link_safe_names: bool = False  # names appear inside [[wiki links]]
    supports_custom_fields: bool = True

    @property
    def whitelist(self) -> frozenset[str]:
        """Keys eligible for frontmatter."""
        return frozenset(f.key for f in self.fields if f.category is FieldCategory.DIRECT)

    @property
    def section_keys(self) -> frozenset[str]:
        """Long-form keys that belong in ``##`` sections."""
        return frozenset(f.key for f in self.fields if f.category is FieldCategory.SECTION)

    def section_headings(self) -> dict[str, str]:
        """Map each long-form key to its section heading, in declaration order."""
        return {
            f.key: f.heading or f.key.capitalize()
            for f in self.fields
            if f.category is FieldCategory.SECTION
        }


def _direct(*keys: str) -> tuple[FieldSpec, ...]:
    return tuple(FieldSpec(key=k) for k in keys)


def _section(key: str, heading: str) -> FieldSpec:
    return FieldSpec(key=key, category=FieldCategory.SECTION, heading=heading)


_LINKED = (
    "linkedCharacters",
    "linkedLocations",
    "linkedEvents",
    "linkedItems",
    "linkedGroups",
)

# ---------------------------------------------------------------------------
# Built-in kinds
# ---------------------------------------------------------------------------

KIND_SCHEMAS: dict[EntityKind, EntityKindSchema] = {
    EntityKind.CHARACTER: EntityKindSchema(
        kind=EntityKind.CHARACTER,
        fields=(
            *_direct(
                "id",
                "name",
                "traits",
                "relationships",
                "locations",
                "events",
                "status",
                "affiliation",
                "groups",
                "profileImagePath",
            ),
            _section("description", "Description"),
            _section("backstory", "Backstory"),
        ),
    ),
    EntityKind.LOCATION: EntityKindSchema(
        kind=EntityKind.LOCATION,
        fields=(
            *_direct(
                "id",
                "name",
                "locationType",
                "region",
                "status",
                "groups",
                "profileImagePath",
            ),
            _section("description", "Description"),
            _section("history", "History"),
        ),
    ),
    EntityKind.EVENT: EntityKindSchema(
        kind=EntityKind.EVENT,
        fields=(
            *_direct(
                "id",
                "name",
                "dateTime",
                "characters",
                "location",
                "images",
                "status",
                "groups",
                "profileImagePath",
            ),
            _section("description", "Description"),
            _section("outcome", "Outcome"),
        ),
        link_safe_names=True,
    ),
    EntityKind.ITEM: EntityKindSchema(
        kind=EntityKind.ITEM,
        fields=(
            *_direct(
                "id",
                "name",
                "isPlotCritical",
                "currentOwner",
                "pastOwners",
                "currentLocation",
                "associatedEvents",
                "groups",
                "profileImagePath",
            ),
            _section("description", "Description"),
            _section("history", "History"),
        ),
    ),
    EntityKind.REFERENCE: EntityKindSchema(
        kind=EntityKind.REFERENCE,
        fields=(
            *_direct("id", "name", "category", "tags", "profileImagePath"),
            _section("content", "Content"),
        ),
        supports_custom_fields=False,
    ),
    EntityKind.CHAPTER: EntityKindSchema(
        kind=EntityKind.CHAPTER,
        fields=(
            *_direct("id", "name", "number", "tags", "profileImagePath", *_LINKED),
            _section("summary", "Summary"),
        ),
        supports_custom_fields=False,
    ),
    EntityKind.SCENE: EntityKindSchema(
        kind=EntityKind.SCENE,
        fields=(
            *_direct(
                "id",
                "name",
                "chapterId",
                "chapterName",
                "status",
                "priority",
                "tags",
                "beats",
                "profileImagePath",
                *_LINKED,
            ),
            _section("content", "Content"),
        ),
        supports_custom_fields=False,
    ),
    EntityKind.GROUP: EntityKindSchema(
        kind=EntityKind.GROUP,
        fields=(
            *_direct("id", "storyId", "name", "color", "tags", "members", "profileImagePath"),
            _section("description", "Description"),
        ),
        supports_custom_fields=False,
    ),
}


def get_schema(kind: str | EntityKind) -> EntityKindSchema:
    """Look up the schema for *kind*.

    Unknown kinds degrade to an empty schema (no whitelist, no sections,
    no custom-field gathering) so that callers never have to guard a
    save against a typo'd tag.
    """
    try:
        return KIND_SCHEMAS[EntityKind(kind)]
    except ValueError:
        return EntityKindSchema(kind=str(kind), supports_custom_fields=False)
