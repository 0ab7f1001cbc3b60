"""
Constants and enums for automapper.

Centralizes magic strings to improve maintainability and type safety.
"""

from enum import Enum


class Direction(str, Enum):
    """Which side's fields drive a traversal."""

    DESTINATION_DRIVEN = "destination_driven"
    SOURCE_DRIVEN = "source_driven"


# Dataclass field metadata key holding a rename/skip directive
TAG_KEY = "automapper"

# Dataclass field metadata key marking an embedded (promoted) aggregate
EMBEDDED_KEY = "automapper.embedded"

# Directive value that excludes a field from mapping
SKIP_DIRECTIVE = "-"

# Environment variable naming a default JSON schema for the CLI
SCHEMA_PATH_ENV = "AUTOMAPPER_SCHEMA_PATH"
