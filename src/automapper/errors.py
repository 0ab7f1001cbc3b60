"""
Exceptions raised by the mapping engine.

Every failure is fatal to the call that raised it. The engine does no
rollback, so a destination may be left partially mapped.
"""

from typing import Any, Optional


def type_name(tp: Any) -> str:
    """Readable name for a class or typing construct."""
    if tp is None:
        return "None"
    if isinstance(tp, type) and not getattr(tp, "__args__", None):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


class MappingError(Exception):
    """
    Base class for mapping failures.

    Attributes:
        message: Description of the innermost failure
        field_path: Field names from the outermost to the failing field
        source_type: Name of the source type at the failure
        dest_type: Name of the destination type at the failure
    """

    kind = "Mapping"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        source_type: Any = None,
        dest_type: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.field_path: list[str] = [field] if field else []
        self.source_type = type_name(source_type) if source_type is not None else None
        self.dest_type = type_name(dest_type) if dest_type is not None else None

    def push_field(self, name: str) -> None:
        """Record that the failure happened below field `name`."""
        self.field_path.insert(0, name)

    @property
    def field(self) -> Optional[str]:
        """Dotted path to the failing field, e.g. ``parents[1].children``."""
        if not self.field_path:
            return None
        path = ""
        for part in self.field_path:
            if part.startswith("[") or not path:
                path += part
            else:
                path += f".{part}"
        return path

    def __str__(self) -> str:
        parts = []
        if self.field:
            parts.append(f"Error mapping field: {self.field}.")
        if self.dest_type:
            parts.append(f"DestType: {self.dest_type}.")
        if self.source_type:
            parts.append(f"SourceType: {self.source_type}.")
        if not parts:
            return self.message
        parts.append(f"Error: {self.message}")
        return " ".join(parts)


class DestNotAddressableError(MappingError):
    """The destination cannot be mutated in place."""

    kind = "DestNotAddressable"


class FieldResolutionError(MappingError):
    """A required field has no counterpart on the opposite side."""

    kind = "FieldResolution"


class TypeIncompatibleError(MappingError):
    """Leaf types are neither identical nor convertible."""

    kind = "TypeIncompatible"
