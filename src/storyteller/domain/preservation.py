"""Preservation checks — detect keys a save would silently drop.

:func:`check_preservation` compares a rebuilt record with the one read
from disk. :func:`emit_yaml_with_logging` wraps :func:`emit_yaml` with
that check and reports problems through structlog, for use while
diagnosing lost-field reports.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import structlog

from storyteller.domain.frontmatter import emit_yaml
from storyteller.domain.merge import POSITION_KEY


@dataclass(frozen=True)
class PreservationReport:
    """Result of a preservation check."""

    valid: bool
    lost_fields: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def check_preservation(
    new: dict[str, Any],
    original: dict[str, Any] | None = None,
) -> PreservationReport:
    """Report keys of *original* missing from *new*, and risky empty keys.

    A missing key makes the report invalid. An empty (``""`` or
    ``None``) key in *new* that *original* did not have is only a
    warning: the builder would not have written it. ``position`` is
    ignored.
    """
    if not original:
        return PreservationReport(valid=True)

    lost: list[str] = []
    warnings: list[str] = []
    for key in original:
        if key == POSITION_KEY or key in new:
            continue
        lost.append(key)
        warnings.append(f"Field {key!r} existed in original file but will be removed on save")

    for key, value in new.items():
        if (value is None or value == "") and key not in original:
            warnings.append(f"Field {key!r} has empty value and may not persist correctly")

    return PreservationReport(valid=not lost, lost_fields=lost, warnings=warnings)


def emit_yaml_with_logging(
    record: dict[str, Any],
    original: dict[str, Any] | None = None,
    context: str | None = None,
) -> str:
    """Emit *record* like :func:`emit_yaml`, logging preservation problems."""
    log = structlog.get_logger("storyteller.preservation").bind(context=context or "yaml")

    if original:
        report = check_preservation(record, original)
        if report.lost_fields:
            log.warning("fields will be lost", lost_fields=report.lost_fields)
        elif report.warnings:
            log.warning("field preservation issues", warnings=report.warnings)

    empty_fields = [k for k, v in record.items() if v is None or v == ""]
    if empty_fields:
        log.debug("preserving empty fields", empty_fields=empty_fields)

    text = emit_yaml(record)

    for key in empty_fields:
        if not re.search(rf"^['\"]?{re.escape(key)}['\"]?:", text, re.MULTILINE):
            log.error("failed to preserve empty field", field=key)

    return text
