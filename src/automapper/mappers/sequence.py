"""
Sequence mapper for ordered collections.

Maps lists and homogeneous tuples element by element, preserving order.
"""

import logging
from typing import Any

from ..errors import MappingError, TypeIncompatibleError, type_name
from ..kinds import is_any, is_optional, sequence_element, sequence_factory, zero_value
from .base import Mapper, MappingContext

logger = logging.getLogger(__name__)


class SequenceMapper(Mapper):
    """
    Maps an ordered sequence onto a sequence of another element type.

    Each source element is mapped onto a fresh zero element of the
    destination element type. An empty source is still checked: a single
    probe element of the source element type is mapped onto a throwaway
    destination element, so incompatible element types fail even when
    there is no data.
    """

    @property
    def strategy_name(self) -> str:
        return "sequence"

    def map(
        self,
        source: Any,
        source_type: Any,
        dest_type: Any,
        dest: Any,
        context: MappingContext,
    ) -> Any:
        if not isinstance(source, (list, tuple)):
            raise TypeIncompatibleError(
                f"cannot map {type_name(type(source))} onto a sequence",
                source_type=source_type,
                dest_type=dest_type,
            )

        source_element = sequence_element(source_type) or Any
        dest_element = sequence_element(dest_type)

        items = []
        for index, item in enumerate(source):
            try:
                items.append(
                    self.engine.map_value(
                        item, source_element, dest_element, zero_value(dest_element), context
                    )
                )
            except MappingError as exc:
                exc.push_field(f"[{index}]")
                raise

        if not source:
            self._probe(source_element, dest_element, context)

        return sequence_factory(dest_type)(items)

    def _probe(self, source_element: Any, dest_element: Any, context: MappingContext) -> None:
        """Map one synthetic element to verify the element types are compatible."""
        if is_any(source_element):
            return
        probe = zero_value(source_element)
        if probe is None and not is_optional(source_element):
            logger.debug(f"No zero value for {type_name(source_element)}, probe skipped")
            return

        logger.debug(
            f"Probing empty sequence: {type_name(source_element)} -> {type_name(dest_element)}"
        )
        try:
            self.engine.map_value(
                probe, source_element, dest_element, zero_value(dest_element), context
            )
        except TypeIncompatibleError:
            raise
        except MappingError as exc:
            raise TypeIncompatibleError(
                f"sequence element types are incompatible: {exc}",
                source_type=source_element,
                dest_type=dest_element,
            ) from exc
