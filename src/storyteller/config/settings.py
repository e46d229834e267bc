"""Unified settings — explicit options, env vars, and defaults in one object.

Priority chain (highest to lowest):
  1. Init kwargs   — options passed by the host application
  2. Env vars      — ``STORYTELLER_*`` prefix, ``__`` for nested sections
  3. Code defaults — baked into the section models

There is no config-file source: the engine never touches the
filesystem, so the host decides where its settings come from.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, TextIO

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from storyteller.config.logging import configure_logging as _configure_logging
from storyteller.config.models import DatesConfig, FrontmatterConfig
from storyteller.domain.dates import DateParseOptions
from storyteller.domain.types import EntityKind


class StorySettings(BaseSettings):
    """Settings for the document engine.

    Frozen after construction. Domain functions never read settings
    themselves; callers turn them into explicit arguments through
    :meth:`date_options` and :meth:`extra_keys_for`, and install logging
    with :meth:`configure_logging`.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "STORYTELLER_",
        "env_nested_delimiter": "__",
    }

    verbose: bool = False
    log_json: bool = False

    frontmatter: FrontmatterConfig = Field(default_factory=FrontmatterConfig)
    dates: DatesConfig = Field(default_factory=DatesConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Only init kwargs and environment variables; no file sources."""
        return (init_settings, env_settings)

    @classmethod
    def from_options(cls, **overrides: Any) -> StorySettings:
        """Construct settings with *overrides* taking priority over env vars."""
        return cls(**overrides)

    def date_options(
        self,
        *,
        reference_date: datetime | date | None = None,
    ) -> DateParseOptions:
        """Parse options from the configured defaults plus an explicit "now"."""
        return DateParseOptions(
            forward_date=self.dates.forward_date,
            timezone=self.dates.timezone,
            locale=self.dates.locale,
            reference_date=reference_date,
        )

    def extra_keys_for(self, kind: str | EntityKind) -> frozenset[str]:
        """Configured extra frontmatter keys for *kind*."""
        return frozenset(self.frontmatter.extra_allowed_keys.get(str(kind), ()))

    def configure_logging(self, *, stream: TextIO | None = None) -> logging.Handler:
        """Install storyteller logging at the configured verbosity and format."""
        return _configure_logging(verbose=self.verbose, log_json=self.log_json, stream=stream)
