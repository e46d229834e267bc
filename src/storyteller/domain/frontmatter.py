"""Frontmatter parsing and YAML emission.

Reading keeps the document's own key order and keeps ``key:`` (blank
after the colon) as ``None`` rather than dropping it. Timestamps are
left as the literal text the user typed; the date parser decides what
they mean.

Writing renders ``""`` for every empty string. A bare ``key:`` reads
back as ``None``, so an empty string emitted that way would silently
change type on the next load.
"""

from __future__ import annotations

import logging
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.constructor import SafeConstructor
from ruamel.yaml.error import YAMLError
from ruamel.yaml.representer import RoundTripRepresenter

logger = logging.getLogger(__name__)

_FRONTMATTER_DELIMITER = "---"


class FrontmatterError(ValueError):
    """A frontmatter block is present but cannot be read as a mapping."""


# ---------------------------------------------------------------------------
# YAML reader / writer
# ---------------------------------------------------------------------------


class _FrontmatterConstructor(SafeConstructor):
    """Safe constructor that keeps timestamps as plain strings.

    A repeated mapping key keeps its first position and its last value.
    """

    def check_mapping_key(
        self,
        node: Any,
        key_node: Any,
        mapping: Any,
        key: Any,
        value: Any,
    ) -> bool:
        if key in mapping:
            logger.warning("Duplicate frontmatter key %r; keeping the last value", key)
            mapping[key] = value
            return False
        return True


_FrontmatterConstructor.add_constructor(
    "tag:yaml.org,2002:timestamp",
    SafeConstructor.construct_yaml_str,
)


class _FrontmatterRepresenter(RoundTripRepresenter):
    """Round-trip representer that always double-quotes empty strings."""

    def represent_str(self, data: str) -> Any:
        if data == "":
            return self.represent_scalar("tag:yaml.org,2002:str", data, style='"')
        return super().represent_str(data)


_FrontmatterRepresenter.add_representer(str, _FrontmatterRepresenter.represent_str)


def _new_reader() -> YAML:
    """Create a fresh loader producing plain dicts, lists, and scalars.

    A key repeated by hand editing keeps its last value instead of
    making the whole block unreadable.
    """
    y = YAML(typ="safe", pure=True)
    y.Constructor = _FrontmatterConstructor
    y.allow_duplicate_keys = True
    return y


def _new_writer() -> YAML:
    """Create a fresh block-style emitter.

    A new instance per call keeps a failed dump from leaving shared
    emitter state behind.
    """
    y = YAML()
    y.Representer = _FrontmatterRepresenter
    y.default_flow_style = False
    y.width = 4096
    y.indent(mapping=2, sequence=4, offset=2)
    return y


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _locate_block(text: str) -> tuple[list[str], int] | None:
    """Return ``(lines, closing_index)`` for a leading ``---`` block."""
    lines = text.replace("\r\n", "\n").split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            return lines, i
    return None


def _load_block(yaml_block: str) -> dict[str, Any] | None:
    try:
        data = _new_reader().load(yaml_block)
    except YAMLError as exc:
        logger.warning("Unreadable frontmatter block: %s", exc)
        return None
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Frontmatter is a %s, not a mapping", type(data).__name__)
        return None
    return data


def parse_frontmatter(text: str) -> dict[str, Any] | None:
    """Parse the leading ``---`` YAML block of *text* into an ordered dict.

    Returns ``None`` when the document has no frontmatter block (missing
    or unterminated delimiters), or when the block is not a readable
    YAML mapping. An empty block yields ``{}``.
    """
    located = _locate_block(text)
    if located is None:
        return None
    lines, end_idx = located
    return _load_block("\n".join(lines[1:end_idx]))


def has_frontmatter_block(text: str) -> bool:
    """True when *text* starts with a terminated ``---`` block, readable or not."""
    return _locate_block(text) is not None


def split_document(text: str) -> tuple[dict[str, Any] | None, str]:
    """Split *text* into ``(frontmatter, body)``.

    Without a frontmatter block the whole text is the body. A single
    blank line after the closing delimiter is not part of the body.
    """
    located = _locate_block(text)
    if located is None:
        return None, text
    lines, end_idx = located
    body = "\n".join(lines[end_idx + 1 :])
    if body.startswith("\n"):
        body = body[1:]
    return _load_block("\n".join(lines[1:end_idx])), body


# ---------------------------------------------------------------------------
# Emission
# ---------------------------------------------------------------------------


def _to_emittable(value: Any) -> Any:
    """Copy *value* into ordered YAML nodes so key order survives the dump."""
    if isinstance(value, dict):
        node = CommentedMap()
        for key, item in value.items():
            node[key] = _to_emittable(item)
        return node
    if isinstance(value, (list, tuple)):
        return [_to_emittable(item) for item in value]
    return value


def emit_yaml(record: dict[str, Any]) -> str:
    """Serialize *record* to block-style YAML ``key: value`` lines.

    Empty strings render as ``key: ""`` and ``None`` as a bare ``key:``.
    Strings that would read back as another type are quoted. Delimiter
    lines are not included; an empty record yields ``""``.
    """
    if not record:
        return ""
    buf = StringIO()
    _new_writer().dump(_to_emittable(record), buf)
    return buf.getvalue()


def wrap_frontmatter(yaml_text: str) -> str:
    """Enclose emitted YAML in ``---`` delimiter lines."""
    if yaml_text and not yaml_text.endswith("\n"):
        yaml_text += "\n"
    return f"{_FRONTMATTER_DELIMITER}\n{yaml_text}{_FRONTMATTER_DELIMITER}\n"
