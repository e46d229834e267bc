"""Domain layer — entity schemas, document parsing, emission, and dates.

This layer depends only on stdlib, pydantic, ruamel.yaml, and dateparser.
It never touches the filesystem and never reads the system clock.
"""
