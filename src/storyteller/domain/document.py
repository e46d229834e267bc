"""Document composition — entity dicts to document text and back.

Pure text-in/text-out glue over the parsers, the builder, and the
emitter. Reading and writing files is the storage layer's job; these
functions only see strings.

Document layout::

    ---
    name: Nyla Kaede
    Element: Flame
    ---

    ## Description
    Street mage & fixer

    ## Backstory
    Raised in the Underway
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from storyteller.domain.builder import build_frontmatter
from storyteller.domain.frontmatter import (
    FrontmatterError,
    emit_yaml,
    has_frontmatter_block,
    split_document,
    wrap_frontmatter,
)
from storyteller.domain.merge import POSITION_KEY
from storyteller.domain.schema import CUSTOM_FIELDS_KEY, get_schema
from storyteller.domain.sections import extract_preamble, parse_sections, render_sections
from storyteller.domain.types import CustomFieldsMode, EntityKind


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def render_document(
    record: dict[str, Any],
    sections: dict[str, str],
    preamble: str = "",
) -> str:
    """Join a frontmatter record and a section map into document text.

    *preamble* is free text placed between the frontmatter and the first
    section.
    """
    head = wrap_frontmatter(emit_yaml(record)) + "\n"
    preamble = preamble.strip()
    if preamble:
        head += preamble + "\n\n"
    return head + render_sections(sections)


def read_entity(
    kind: str | EntityKind,
    text: str,
    defaults: Mapping[str, Any] | None = None,
    *,
    custom_fields_mode: str | CustomFieldsMode | None = None,
) -> dict[str, Any]:
    """Load an entity dict from document text.

    Frontmatter keys override *defaults*; section bodies fill the kind's
    long-form keys. In flatten mode, scalar keys outside the kind's
    schema are gathered into ``customFields`` with ``None`` shown as
    ``""`` for editing. In nested mode ``customFields`` is read from the
    frontmatter mapping of that name.
    """
    schema = get_schema(kind)
    mode = CustomFieldsMode(custom_fields_mode or schema.custom_fields_mode)
    record, body = split_document(text)
    sections = parse_sections(body)

    entity: dict[str, Any] = copy.deepcopy(dict(defaults or {}))
    custom: dict[str, Any] = {}
    known = schema.whitelist | schema.section_keys

    for key, value in (record or {}).items():
        if key == POSITION_KEY:
            continue
        if not schema.supports_custom_fields:
            entity[key] = value
        elif key == CUSTOM_FIELDS_KEY and mode is CustomFieldsMode.NESTED:
            if isinstance(value, dict):
                custom.update(value)
        elif (
            mode is CustomFieldsMode.FLATTEN
            and key not in known
            and key != CUSTOM_FIELDS_KEY
            and _is_scalar(value)
        ):
            custom[key] = "" if value is None else value
        else:
            entity[key] = value

    for key, heading in schema.section_headings().items():
        if heading in sections:
            entity[key] = sections[heading]

    if schema.supports_custom_fields:
        entity[CUSTOM_FIELDS_KEY] = custom
    return entity


def write_entity(
    kind: str | EntityKind,
    entity: Mapping[str, Any],
    *,
    original_text: str | None = None,
    extra_allowed_keys: Iterable[str] | None = None,
    custom_fields_mode: str | CustomFieldsMode | None = None,
) -> str:
    """Render an entity to document text, preserving the prior document.

    Frontmatter is rebuilt with :func:`build_frontmatter` against the
    prior frontmatter. For each long-form key of the kind, the entity
    value wins when the entity has the key (an empty value keeps the
    heading only when it existed before); otherwise the prior section
    body is kept. Prior sections that map to no field follow, verbatim
    and in their original order. Free text above the first heading is
    kept in place.

    Raises:
        FrontmatterError: If *original_text* has a frontmatter block that
            cannot be read. Rebuilding from the entity alone would drop
            every key the block holds.
    """
    schema = get_schema(kind)
    original: dict[str, Any] | None = None
    old_sections: dict[str, str] = {}
    preamble = ""
    if original_text is not None:
        original, old_body = split_document(original_text)
        if original is None and has_frontmatter_block(original_text):
            msg = "existing frontmatter block is unreadable; refusing to overwrite it"
            raise FrontmatterError(msg)
        old_sections = parse_sections(old_body)
        preamble = extract_preamble(old_body)

    record = build_frontmatter(
        kind,
        entity,
        extra_allowed_keys,
        custom_fields_mode=custom_fields_mode,
        original_frontmatter=original,
    )

    headings = schema.section_headings()
    sections: dict[str, str] = {}
    for key, heading in headings.items():
        if key in entity:
            value = entity[key]
            text = "" if value is None else str(value).strip()
            if text or heading in old_sections:
                sections[heading] = text
        elif heading in old_sections:
            sections[heading] = old_sections[heading]

    mapped = set(headings.values())
    for heading, text in old_sections.items():
        if heading not in mapped:
            sections[heading] = text

    return render_document(record, sections, preamble)
