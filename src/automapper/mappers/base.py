"""
Base mapper class and context for value mapping.

Provides the abstract interface that every mapping strategy implements,
along with the immutable context threaded through a traversal.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..constants import Direction
from ..kinds import writable, zero_value

if TYPE_CHECKING:
    from ..engine import MappingEngine


@dataclass(frozen=True)
class MappingContext:
    """
    Settings of one top-level mapping call.

    Created once by an entry point and passed unchanged to every recursive
    call, so a traversal never depends on shared mutable state.

    Attributes:
        direction: Which side's fields drive the traversal
        strict: Unresolved destination fields are errors. Only consulted
                for destination-driven traversal; source-driven traversal
                is always strict.
    """

    direction: Direction = Direction.DESTINATION_DRIVEN
    strict: bool = True

    @property
    def destination_driven(self) -> bool:
        return self.direction == Direction.DESTINATION_DRIVEN

    @property
    def loose(self) -> bool:
        """Unresolved destination fields are left as they are."""
        return self.destination_driven and not self.strict


class Mapper(ABC):
    """
    Abstract base class for mapping strategies.

    The engine picks a strategy for each (source, destination) pair and the
    strategy calls back into the engine for every nested pair.

    Subclasses must implement:
    - strategy_name: Short name used in log messages
    - map(): The mapping logic, returning the value to store in the
      destination slot
    """

    def __init__(self, engine: "MappingEngine"):
        self.engine = engine

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        """Short name of this strategy."""
        pass

    @abstractmethod
    def map(
        self,
        source: Any,
        source_type: Any,
        dest_type: Any,
        dest: Any,
        context: MappingContext,
    ) -> Any:
        """
        Map `source` onto `dest`.

        Args:
            source: Value being read
            source_type: Declared type of `source`
            dest_type: Declared type of the destination slot
            dest: Current value of the destination slot
            context: Settings of the running traversal

        Returns:
            The value to store in the destination slot. Aggregates already
            present in the slot are mutated in place and returned.
        """
        pass

    def prepare_destination(self, dest: Any, dest_type: Any) -> Any:
        """
        Return an instance of aggregate `dest_type` to mutate.

        Reuses `dest` when it already is one, otherwise allocates a zero
        instance. A frozen `dest` is replaced by a shallow copy, which the
        caller stores back into the slot.
        """
        if dest is None or not isinstance(dest, dest_type):
            return zero_value(dest_type)
        return writable(dest)
