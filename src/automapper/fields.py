"""
Field descriptors for dataclass aggregates.

A descriptor table is built once per dataclass and cached. It records the
rename/skip directive and embedded flag carried in field metadata::

    from dataclasses import dataclass

    import automapper

    @dataclass
    class UserDTO:
        name: str = automapper.field("username", default="")
        password: str = automapper.field("-", default="")
        audit: Audit = automapper.field(embedded=True, default_factory=Audit)
"""

import dataclasses
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

from .constants import EMBEDDED_KEY, SKIP_DIRECTIVE, TAG_KEY
from .errors import type_name
from .kinds import is_aggregate, optional_inner, set_field, type_hints, writable, zero_value

# Returned when a field is reached through an embedded aggregate that is None
ABSENT = object()


def field(tag: Optional[str] = None, *, embedded: bool = False, **kwargs: Any) -> Any:
    """
    Declare a dataclass field with a mapping directive.

    Args:
        tag: ``"-"`` to exclude the field from mapping, or the name to look
             for on the opposite side instead of the field's own name
        embedded: Promote the fields of this aggregate into its parent
        **kwargs: Passed through to ``dataclasses.field``
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    if tag is not None:
        metadata[TAG_KEY] = tag
    if embedded:
        metadata[EMBEDDED_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Mapping metadata for one dataclass field.

    Attributes:
        name: Declared field name
        declared_type: Resolved type hint
        rename: Name to use on the opposite side, if overridden
        skip: Field is never read or written
        embedded: Field's own fields are promoted into the parent
    """

    name: str
    declared_type: Any
    rename: Optional[str] = None
    skip: bool = False
    embedded: bool = False

    @property
    def mapped_name(self) -> str:
        """Name used when searching the opposite side."""
        return self.rename or self.name

    @property
    def aggregate_type(self) -> Any:
        """Declared type with any optional wrapper removed."""
        return optional_inner(self.declared_type) or self.declared_type


@lru_cache(maxsize=None)
def describe(cls: type) -> tuple[FieldDescriptor, ...]:
    """
    Build the descriptor table of a dataclass, in declaration order.

    Fields whose name starts with an underscore are private and always
    skipped.

    Raises:
        TypeError: If an embedded field is not a (possibly optional) dataclass
    """
    hints = type_hints(cls)
    descriptors = []
    for f in dataclasses.fields(cls):
        tag = f.metadata.get(TAG_KEY)
        descriptor = FieldDescriptor(
            name=f.name,
            declared_type=hints.get(f.name, Any),
            rename=tag if tag and tag != SKIP_DIRECTIVE else None,
            skip=tag == SKIP_DIRECTIVE or f.name.startswith("_"),
            embedded=bool(f.metadata.get(EMBEDDED_KEY)),
        )
        if descriptor.embedded and not is_aggregate(descriptor.aggregate_type):
            raise TypeError(
                f"Embedded field {type_name(cls)}.{f.name} must be a dataclass, "
                f"got {type_name(descriptor.declared_type)}"
            )
        descriptors.append(descriptor)
    return tuple(descriptors)


@lru_cache(maxsize=None)
def field_path(
    cls: type, name: str, match_rename: bool = False
) -> Optional[tuple[FieldDescriptor, ...]]:
    """
    Locate a field by name, including fields promoted through embedded
    aggregates.

    The search goes breadth-first through embedded levels and the shallowest
    match wins. Two matches at the same depth are ambiguous and count as not
    found. Skipped fields never match.

    Args:
        cls: Dataclass to search
        name: Field name to find
        match_rename: Also match a field's rename directive

    Returns:
        Descriptors from the outermost embedded field down to the match,
        or None if there is no unambiguous match
    """
    level: list[tuple[tuple[FieldDescriptor, ...], type]] = [((), cls)]
    while level:
        matches = []
        next_level = []
        for prefix, tp in level:
            for descriptor in describe(tp):
                if descriptor.skip:
                    continue
                if descriptor.name == name or (match_rename and descriptor.rename == name):
                    matches.append(prefix + (descriptor,))
                elif descriptor.embedded:
                    next_level.append((prefix + (descriptor,), descriptor.aggregate_type))
        if matches:
            return matches[0] if len(matches) == 1 else None
        level = next_level
    return None


def read_path(value: Any, path: tuple[FieldDescriptor, ...]) -> Any:
    """
    Read the field at the end of `path`.

    Returns ABSENT when an embedded aggregate along the way is None.
    """
    for descriptor in path[:-1]:
        value = getattr(value, descriptor.name)
        if value is None:
            return ABSENT
    return getattr(value, path[-1].name)


def writable_parent(dest: Any, path: tuple[FieldDescriptor, ...]) -> Any:
    """
    Return the object that owns the last field of `path`.

    Embedded aggregates that are None along the way are allocated, and
    frozen ones are replaced by a shallow copy.
    """
    target = dest
    for descriptor in path[:-1]:
        current = getattr(target, descriptor.name)
        child = zero_value(descriptor.aggregate_type) if current is None else writable(current)
        if child is not current:
            set_field(target, descriptor.name, child)
        target = child
    return target
