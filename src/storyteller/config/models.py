"""Pydantic configuration sections with code-baked defaults.

Every section is frozen; a deployment only overrides what it needs,
typically through ``STORYTELLER_*`` environment variables.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from storyteller.domain.types import CustomFieldsMode


class FrontmatterConfig(BaseModel):
    """Frontmatter building options."""

    model_config = {"frozen": True}

    custom_fields_mode: CustomFieldsMode = CustomFieldsMode.FLATTEN
    # kind -> keys allowed in addition to the kind's whitelist
    extra_allowed_keys: dict[str, list[str]] = Field(default_factory=dict)


class DatesConfig(BaseModel):
    """Date parsing and display defaults."""

    model_config = {"frozen": True}

    timezone: str = "UTC"
    locale: str = "en-US"
    forward_date: bool = False
