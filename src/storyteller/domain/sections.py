"""Section parsing — split a markdown body into ``## Heading`` blocks.

Two strategies, each a pure function:

- :func:`match_sections` — heading-anchored multi-line pattern (fast path).
- :func:`scan_sections` — tolerant line scanner (fallback).

:func:`parse_sections` tries the pattern first and only falls back when
it found nothing although the body still contains ``##``. A fallback is
logged as a warning so that regressions in the pattern show up.

INVARIANT: Every ``##`` heading yields exactly one entry, even when its
body is empty. Omitting an empty section makes the next section's text
appear under the previous field when the entity is loaded for editing.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# ``## Heading`` up to the next level-2 heading line or end of input.
# ``###`` and deeper headings are body content.
_SECTION_PATTERN = re.compile(
    r"^##(?!#)[ \t]*([^\n\r]+?)[ \t]*(?:\r?\n|\Z)(.*?)(?=^##(?!#)|\Z)",
    re.MULTILINE | re.DOTALL,
)
_HEADING_PREFIX = re.compile(r"^##[ \t]*")


def _is_heading(line: str) -> bool:
    return line.startswith("##") and not line.startswith("###")


def match_sections(body: str) -> dict[str, str]:
    """Extract sections with the heading-anchored pattern."""
    sections: dict[str, str] = {}
    for match in _SECTION_PATTERN.finditer(body):
        name = match.group(1).strip()
        if name:
            sections[name] = match.group(2).strip()
    return sections


def scan_sections(body: str) -> dict[str, str]:
    """Extract sections by walking lines.

    Each heading line flushes the buffer collected under the previous
    heading, empty or not; the final buffer is flushed at end of input.
    Lines before the first heading are ignored.
    """
    sections: dict[str, str] = {}
    current: str | None = None
    buffer: list[str] = []
    for line in body.splitlines():
        if _is_heading(line):
            if current:
                sections[current] = "\n".join(buffer).strip()
            current = _HEADING_PREFIX.sub("", line).strip()
            buffer = []
        elif current is not None:
            buffer.append(line)
    if current:
        sections[current] = "\n".join(buffer).strip()
    return sections


def parse_sections(body: str) -> dict[str, str]:
    """Split *body* into an ordered ``heading -> text`` map.

    Headings are stored without the ``##`` marker and surrounding
    whitespace; section text is trimmed at both ends only.
    """
    if not body:
        return {}
    sections = match_sections(body)
    if sections or "##" not in body:
        return sections

    sections = scan_sections(body)
    if sections:
        logger.warning(
            "Section pattern found no headings; line scanner recovered %d section(s)",
            len(sections),
        )
    return sections


def extract_preamble(body: str) -> str:
    """Return the trimmed text before the first ``##`` heading."""
    lines: list[str] = []
    for line in body.splitlines():
        if _is_heading(line):
            break
        lines.append(line)
    return "\n".join(lines).strip()


def render_sections(sections: dict[str, str]) -> str:
    """Render a section map back to ``## Heading`` blocks in map order."""
    parts: list[str] = []
    for heading, text in sections.items():
        text = text.strip()
        parts.append(f"## {heading}\n{text}\n\n" if text else f"## {heading}\n\n")
    return "".join(parts)
