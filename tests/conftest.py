"""Shared pytest fixtures and test helpers for storyteller tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from datetime import datetime

import pytest

from storyteller.config.settings import StorySettings


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo any logging configuration a test installs."""
    story = logging.getLogger("storyteller")
    handlers, level, propagate = story.handlers[:], story.level, story.propagate
    quiet = {name: logging.getLogger(name).level for name in ("dateparser", "tzlocal")}
    yield
    story.handlers = handlers
    story.propagate = propagate
    story.setLevel(level)
    for name, quiet_level in quiet.items():
        logging.getLogger(name).setLevel(quiet_level)


@pytest.fixture
def character_document() -> str:
    """A hand-edited character file with user-added and empty fields."""
    return (
        "---\n"
        "name: Nyla Kaede\n"
        "Element: Flame\n"
        "status: active\n"
        "customField1:\n"
        "traits:\n"
        "  - cunning\n"
        "  - loyal\n"
        "---\n"
        "\n"
        "## Description\n"
        "Street mage & fixer\n"
        "\n"
        "## Backstory\n"
        "Raised in the Underway, Nyla bargains with living fire\n"
        "\n"
        "## Notes\n"
        "Keep her away from the harbor.\n"
    )


@pytest.fixture
def reference_date() -> datetime:
    """Fixed "now" for relative date parsing."""
    return datetime(2024, 3, 1)


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> StorySettings:
    """Settings built from code defaults only."""
    for name in (
        "STORYTELLER_VERBOSE",
        "STORYTELLER_LOG_JSON",
        "STORYTELLER_FRONTMATTER",
        "STORYTELLER_DATES",
        "STORYTELLER_DATES__TIMEZONE",
        "STORYTELLER_DATES__LOCALE",
        "STORYTELLER_FRONTMATTER__CUSTOM_FIELDS_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    return StorySettings.from_options()
