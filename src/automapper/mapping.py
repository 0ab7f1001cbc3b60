"""
Public entry points.

Each entry point validates its destination, builds the MappingContext for
its traversal mode and runs the engine. The destination is mutated in place
and also returned for convenience.

A failed call raises a MappingError subclass. Nothing is rolled back: the
destination may already hold some mapped fields.
"""

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from .constants import Direction
from .engine import MappingEngine
from .errors import DestNotAddressableError, TypeIncompatibleError, type_name
from .kinds import ensure_mutable
from .mappers.base import MappingContext

__all__ = ["map_to_destination", "map_from_source", "map_from_source_map", "map_loose"]

logger = logging.getLogger(__name__)

D = TypeVar("D")


def map_to_destination(source: Any, dest: D) -> D:
    """
    Fill every field of `dest` from `source`.

    All fields of the destination must be found on the source, unless
    skipped with an ``automapper.field("-")`` directive. Nested dataclasses,
    optionals and sequences are mapped recursively, as long as their types
    follow the same rule.

    A field renamed on only one side therefore raises instead of leaving the
    destination unpopulated.

    Args:
        source: Dataclass instance (or dict) to read
        dest: Dataclass instance to fill

    Returns:
        `dest`

    Raises:
        DestNotAddressableError: If `dest` is not a mutable dataclass instance
        FieldResolutionError: If a destination field has no source counterpart
        TypeIncompatibleError: If leaf types cannot be converted
    """
    return _run(source, dest, MappingContext(Direction.DESTINATION_DRIVEN, strict=True))


def map_loose(source: Any, dest: D) -> D:
    """
    Like map_to_destination, but destination fields missing from the source
    are left at their current value instead of raising.
    """
    return _run(source, dest, MappingContext(Direction.DESTINATION_DRIVEN, strict=False))


def map_from_source(source: Any, dest: D) -> D:
    """
    Copy every field of `source` into `dest`.

    The source drives the traversal: each non-skipped source field must have
    a destination field of the same name (or rename directive). Destination
    fields with no source counterpart are left untouched. This direction is
    always strict.

    Raises:
        DestNotAddressableError: If `dest` is not a mutable dataclass instance
        FieldResolutionError: If a source field has no destination counterpart
        TypeIncompatibleError: If leaf types cannot be converted
    """
    return _run(source, dest, MappingContext(Direction.SOURCE_DRIVEN, strict=True))


def map_from_source_map(source: Mapping[str, Any], dest: D) -> D:
    """
    Patch `dest` with the entries of a string-keyed mapping.

    Each key names a destination field, by declared name or by its
    ``automapper.field("name")`` rename. Fields not mentioned keep their
    current value; nested dicts patch nested dataclasses the same way.

    Example:
        >>> map_from_source_map({"name": "abc"}, user)
    """
    _validate_destination(dest)
    if not isinstance(source, Mapping):
        raise TypeIncompatibleError(
            f"source must be a mapping, got {type_name(type(source))}",
            source_type=type(source),
            dest_type=type(dest),
        )
    context = MappingContext(Direction.DESTINATION_DRIVEN, strict=False)
    engine = MappingEngine(context)
    engine.dynamic.map(source, type(source), type(dest), dest, context)
    return dest


def _run(source: Any, dest: D, context: MappingContext) -> D:
    _validate_destination(dest)
    if source is None:
        raise TypeIncompatibleError("source must not be None", dest_type=type(dest))

    logger.debug(
        f"Mapping {type_name(type(source))} -> {type_name(type(dest))} "
        f"({context.direction.value}, strict={context.strict})"
    )
    MappingEngine(context).map_value(source, type(source), type(dest), dest, context)
    return dest


def _validate_destination(dest: Any) -> None:
    """Raise DestNotAddressableError unless `dest` is a mutable dataclass instance."""
    if isinstance(dest, type) or not dataclasses.is_dataclass(dest):
        raise DestNotAddressableError(
            f"destination must be a dataclass instance, got {type_name(type(dest))}",
            dest_type=type(dest),
        )
    ensure_mutable(dest)
