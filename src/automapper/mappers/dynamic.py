"""
Map-source adapter.

Treats a string-keyed mapping as a virtual aggregate whose fields are its
keys. Only the keys present are written, so mapping a dict onto an existing
dataclass behaves like a patch.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ..errors import MappingError, TypeIncompatibleError, type_name
from ..fields import field_path, writable_parent
from ..kinds import set_field
from .base import Mapper, MappingContext

logger = logging.getLogger(__name__)


class DynamicSourceMapper(Mapper):
    """
    Maps the entries of a dict onto the same-named fields of a dataclass.
    A key matches a field by declared name or by rename directive.

    Destination fields without a matching key keep their current value.
    Keys without a matching destination field are ignored. Each value is
    mapped with its runtime type as its declared type.
    """

    @property
    def strategy_name(self) -> str:
        return "dynamic"

    def map(
        self,
        source: Mapping,
        source_type: Any,
        dest_type: Any,
        dest: Any,
        context: MappingContext,
    ) -> Any:
        dest = self.prepare_destination(dest, dest_type)

        for key, value in source.items():
            if not isinstance(key, str):
                raise TypeIncompatibleError(
                    f"mapping keys must be strings, got {type_name(type(key))}",
                    source_type=type(source),
                    dest_type=dest_type,
                )

            path = field_path(dest_type, key, match_rename=True)
            if path is None:
                logger.debug(f"Ignoring key {key!r}: no field in {type_name(dest_type)}")
                continue

            try:
                owner = writable_parent(dest, path)
                target = path[-1]
                current = getattr(owner, target.name)
                mapped = self.engine.map_value(value, Any, target.declared_type, current, context)
                set_field(owner, target.name, mapped)
            except MappingError as exc:
                exc.push_field(key)
                raise

        return dest
