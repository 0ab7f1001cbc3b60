"""
Mapping strategies used by the engine.

Each strategy handles one shape of (source, destination) pair and recurses
through the engine for nested values.
"""

from .base import Mapper, MappingContext
from .dynamic import DynamicSourceMapper
from .fields import FieldMapper
from .sequence import SequenceMapper

__all__ = [
    "Mapper",
    "MappingContext",
    "FieldMapper",
    "SequenceMapper",
    "DynamicSourceMapper",
]
