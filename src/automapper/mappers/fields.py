"""
Field resolver for aggregate-to-aggregate mapping.

Walks the fields of the driving side and finds the matching field on the
other side, honoring rename/skip directives and embedded-field promotion.
"""

import logging
from typing import Any, Optional

from ..errors import FieldResolutionError, MappingError, type_name
from ..fields import ABSENT, FieldDescriptor, describe, field_path, read_path, writable_parent
from ..kinds import is_aggregate, set_field
from .base import Mapper, MappingContext

logger = logging.getLogger(__name__)


class FieldMapper(Mapper):
    """
    Maps one dataclass onto another field by field.

    Destination-driven traversal enumerates destination fields and resolves
    each on the source. Source-driven traversal enumerates source fields
    and requires each to exist on the destination.

    Name resolution on the source side (destination-driven):
    1. A field under an embedded aggregate that is None is skipped silently
    2. Direct match, including fields promoted through embedded aggregates
    3. Destination aggregate with no match: the whole source fills it
    4. Destination leaf with no match: search one level into the source's
       nested aggregates, first match wins
    5. Otherwise a loose traversal leaves the field alone; a strict one fails
    """

    @property
    def strategy_name(self) -> str:
        return "fields"

    def map(
        self,
        source: Any,
        source_type: Any,
        dest_type: Any,
        dest: Any,
        context: MappingContext,
    ) -> Any:
        dest = self.prepare_destination(dest, dest_type)
        if context.destination_driven:
            self._map_destination_fields(source, source_type, dest, dest_type, context)
            return dest
        return self._map_source_fields(source, source_type, dest, dest_type, context)

    # -------------------------------------------------------------------------
    # Destination-driven traversal
    # -------------------------------------------------------------------------

    def _map_destination_fields(
        self,
        source: Any,
        source_type: type,
        dest: Any,
        dest_type: type,
        context: MappingContext,
    ) -> None:
        for descriptor in describe(dest_type):
            if descriptor.skip:
                continue
            try:
                if descriptor.embedded:
                    # The whole source feeds the embedded aggregate
                    self._assign(dest, descriptor, source, source_type, context)
                else:
                    self._resolve_by_name(source, source_type, dest, descriptor, context)
            except MappingError as exc:
                exc.push_field(descriptor.name)
                raise

    def _resolve_by_name(
        self,
        source: Any,
        source_type: type,
        dest: Any,
        descriptor: FieldDescriptor,
        context: MappingContext,
    ) -> None:
        name = descriptor.mapped_name

        path = field_path(source_type, name)
        if path is not None:
            value = read_path(source, path)
            if value is ABSENT:
                logger.debug(
                    f"Field {name!r} of {type_name(source_type)} is under a None "
                    f"embedded aggregate, leaving destination untouched"
                )
                return
            self._assign(dest, descriptor, value, path[-1].declared_type, context)
            return

        if is_aggregate(descriptor.declared_type):
            logger.debug(
                f"No source field {name!r}, filling nested {type_name(descriptor.declared_type)} "
                f"from the whole {type_name(source_type)}"
            )
            self._assign(dest, descriptor, source, source_type, context)
            return

        nested = self._find_in_nested(source, source_type, name)
        if nested is not None:
            value, value_type = nested
            self._assign(dest, descriptor, value, value_type, context)
            return

        if context.loose:
            logger.debug(f"No source field {name!r} in {type_name(source_type)}, skipped")
            return

        raise FieldResolutionError(
            f"source has no field named {name!r}",
            source_type=source_type,
            dest_type=type(dest),
        )

    def _find_in_nested(
        self, source: Any, source_type: type, name: str
    ) -> Optional[tuple[Any, Any]]:
        """Search exactly one level into the source's nested aggregates."""
        for candidate in describe(source_type):
            if candidate.skip or not is_aggregate(candidate.declared_type):
                continue
            nested = getattr(source, candidate.name)
            if nested is None:
                continue
            path = field_path(candidate.declared_type, name)
            if path is None:
                continue
            value = read_path(nested, path)
            if value is ABSENT:
                continue
            logger.debug(f"Resolved {name!r} through nested field {candidate.name!r}")
            return value, path[-1].declared_type
        return None

    # -------------------------------------------------------------------------
    # Source-driven traversal
    # -------------------------------------------------------------------------

    def _map_source_fields(
        self,
        source: Any,
        source_type: type,
        dest: Any,
        dest_type: type,
        context: MappingContext,
    ) -> Any:
        for descriptor in describe(source_type):
            if descriptor.skip:
                continue
            try:
                value = getattr(source, descriptor.name)
                if descriptor.embedded:
                    if value is None:
                        continue
                    # The embedded source maps onto the whole destination
                    dest = self.engine.map_value(
                        value, descriptor.aggregate_type, dest_type, dest, context
                    )
                    continue

                path = field_path(dest_type, descriptor.mapped_name, match_rename=True)
                if path is None:
                    raise FieldResolutionError(
                        f"destination has no field matching {descriptor.mapped_name!r}",
                        source_type=source_type,
                        dest_type=dest_type,
                    )
                owner = writable_parent(dest, path)
                self._assign(owner, path[-1], value, descriptor.declared_type, context)
            except MappingError as exc:
                exc.push_field(descriptor.name)
                raise
        return dest

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _assign(
        self,
        owner: Any,
        descriptor: FieldDescriptor,
        value: Any,
        value_type: Any,
        context: MappingContext,
    ) -> None:
        current = getattr(owner, descriptor.name)
        mapped = self.engine.map_value(value, value_type, descriptor.declared_type, current, context)
        set_field(owner, descriptor.name, mapped)
