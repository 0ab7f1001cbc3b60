"""
Mapping engine - dispatch for recursive value mapping.

This module provides the MappingEngine class, which classifies each
(source, destination) pair by type shape and hands it to the matching
strategy. Strategies call back into the engine for nested pairs until only
directly assignable leaf values remain.
"""

import copy
import dataclasses
import logging
from collections.abc import Mapping
from typing import Any, Optional

from .errors import type_name
from .kinds import (
    convert_leaf,
    is_aggregate,
    is_any,
    is_frozen,
    is_union,
    optional_inner,
    sequence_element,
    zero_value,
)
from .mappers.base import Mapper, MappingContext
from .mappers.dynamic import DynamicSourceMapper
from .mappers.fields import FieldMapper
from .mappers.sequence import SequenceMapper

logger = logging.getLogger(__name__)


class MappingEngine:
    """
    Dispatches value pairs to mapping strategies.

    Decision order, first match wins:
    1. Aggregate destination, optional source: dereference the source,
       using a zero instance when it is None
    2. Identical declared types: shallow copy
    3. Both aggregates: field mapper
    4. Mapping source, aggregate destination: dynamic source mapper
    5. Optional destination: None stays None, otherwise map into a fresh
       instance of the referenced type
    6. Sequence destination: sequence mapper
    7. Leaf conversion

    Example:
        engine = MappingEngine(MappingContext(strict=False))
        dest = engine.map_value(source, SourceDTO, Model, Model())

    Attributes:
        context: Default context used when map_value is called without one
        fields: Strategy for aggregate pairs
        sequences: Strategy for ordered sequences
        dynamic: Strategy for mapping sources
    """

    def __init__(self, context: Optional[MappingContext] = None):
        """
        Initialize the engine.

        Args:
            context: Default MappingContext. If None, a strict
                     destination-driven context is used.
        """
        self.context = context or MappingContext()
        self.fields = FieldMapper(self)
        self.sequences = SequenceMapper(self)
        self.dynamic = DynamicSourceMapper(self)

    def map_value(
        self,
        source: Any,
        source_type: Any,
        dest_type: Any,
        dest: Any = None,
        context: Optional[MappingContext] = None,
    ) -> Any:
        """
        Map `source` onto a destination slot of type `dest_type`.

        Args:
            source: Value being read
            source_type: Declared type of `source`; Any uses its runtime type
            dest_type: Declared type of the destination slot
            dest: Current value of the destination slot
            context: Traversal settings, defaults to the engine's context

        Returns:
            The value to store in the destination slot

        Raises:
            MappingError: If the pair cannot be mapped
        """
        context = context or self.context
        source_type = self._declared_type(source, source_type)
        source_inner = optional_inner(source_type)

        if is_aggregate(dest_type) and source_inner is not None:
            if source is None:
                source = zero_value(source_inner)
                if source is None:
                    logger.debug(
                        f"No zero value for {type_name(source_inner)}, "
                        f"leaving {type_name(dest_type)} untouched"
                    )
                    return dest
            return self.map_value(source, source_inner, dest_type, dest, context)

        if source_type == dest_type:
            return self._copy(source, dest, dest_type)

        if source is not None and source_inner is not None:
            source_type = source_inner
        if source is not None and is_union(source_type):
            source_type = type(source)

        if is_aggregate(dest_type):
            if is_aggregate(source_type):
                return self._delegate(self.fields, source, source_type, dest_type, dest, context)
            if isinstance(source, Mapping):
                return self._delegate(self.dynamic, source, source_type, dest_type, dest, context)
            if source is None:
                logger.debug(f"Absent source of unknown type, {type_name(dest_type)} untouched")
                return dest

        dest_inner = optional_inner(dest_type)
        if dest_inner is not None:
            if source is None:
                return None
            return self.map_value(source, source_type, dest_inner, zero_value(dest_inner), context)

        if sequence_element(dest_type) is not None:
            return self._delegate(self.sequences, source, source_type, dest_type, dest, context)

        return convert_leaf(source, source_type, dest_type)

    def _delegate(
        self,
        strategy: Mapper,
        source: Any,
        source_type: Any,
        dest_type: Any,
        dest: Any,
        context: MappingContext,
    ) -> Any:
        logger.debug(
            f"[{strategy.strategy_name}] {type_name(source_type)} -> {type_name(dest_type)}"
        )
        return strategy.map(source, source_type, dest_type, dest, context)

    def _declared_type(self, value: Any, declared: Any) -> Any:
        """Fall back to the runtime type when the declared type is unknown."""
        if declared is None or is_any(declared):
            return Any if value is None else type(value)
        if value is None and optional_inner(declared) is None:
            return Optional[declared]
        return declared

    def _copy(self, source: Any, dest: Any, dest_type: Any) -> Any:
        """
        Shallow copy for identical types.

        A mutable destination aggregate receives the copy in place so that
        references to it stay valid.
        """
        if (
            source is not None
            and is_aggregate(dest_type)
            and isinstance(dest, dest_type)
            and not is_frozen(dest_type)
        ):
            for f in dataclasses.fields(dest_type):
                setattr(dest, f.name, getattr(source, f.name))
            return dest
        return copy.copy(source)
