"""storyteller — round-trip engine for human-editable story entity documents."""

__version__ = "0.1.0"
