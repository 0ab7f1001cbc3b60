"""
Type-kind classification for the mapping engine.

Answers the questions the dispatcher asks about a declared type: is it an
aggregate, an optional reference, an ordered sequence or a leaf, what is its
zero value, and can a leaf of one kind be converted to another.
"""

import copy
import dataclasses
import decimal
import enum
import inspect
import logging
import numbers
import types
import typing
from collections.abc import Mapping, MutableSequence, Sequence
from functools import lru_cache
from typing import Any, Optional, Union

from .errors import DestNotAddressableError, TypeIncompatibleError, type_name

logger = logging.getLogger(__name__)

NoneType = type(None)

_SEQUENCE_ORIGINS = (list, Sequence, MutableSequence)


def is_any(tp: Any) -> bool:
    """Whether `tp` places no constraint on the value."""
    return tp is Any or tp is object


def is_aggregate(tp: Any) -> bool:
    """Whether `tp` is a dataclass type."""
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def is_union(tp: Any) -> bool:
    origin = typing.get_origin(tp)
    return origin is Union or origin is types.UnionType


def optional_inner(tp: Any) -> Optional[Any]:
    """
    Return the referenced type of an optional type.

    ``Optional[X]`` gives ``X``; ``Union[A, B, None]`` gives ``Union[A, B]``.
    Returns None when `tp` is not optional.
    """
    if not is_union(tp):
        return None
    args = typing.get_args(tp)
    if NoneType not in args:
        return None
    rest = tuple(arg for arg in args if arg is not NoneType)
    if len(rest) == 1:
        return rest[0]
    return Union[rest]


def is_optional(tp: Any) -> bool:
    return optional_inner(tp) is not None


def supertype(tp: Any) -> Any:
    """Unwrap ``typing.NewType`` chains to the runtime class."""
    while hasattr(tp, "__supertype__"):
        tp = tp.__supertype__
    return tp


def sequence_element(tp: Any) -> Optional[Any]:
    """
    Element type of an ordered sequence type, or None for non-sequences.

    Recognizes ``list[X]``, ``List[X]``, ``Sequence[X]``,
    ``MutableSequence[X]`` and ``tuple[X, ...]``. Unparameterized
    sequences have element type ``Any``.
    """
    if tp is list:
        return Any
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)
    if origin in _SEQUENCE_ORIGINS:
        return args[0] if args else Any
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        return args[0]
    return None


def sequence_factory(tp: Any) -> type:
    """Concrete class used to build a sequence of declared type `tp`."""
    return tuple if typing.get_origin(tp) is tuple else list


@lru_cache(maxsize=None)
def type_hints(cls: type) -> dict[str, Any]:
    """
    Resolved field annotations of a dataclass.

    Falls back to the raw annotations when forward references cannot be
    resolved; unresolved string annotations become ``Any``.
    """
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as e:
        logger.debug(f"Could not resolve type hints of {type_name(cls)}: {e}")
        return {
            f.name: Any if isinstance(f.type, str) else f.type
            for f in dataclasses.fields(cls)
        }


def zero_value(tp: Any) -> Any:
    """
    The zero value of a declared type.

    Optionals are None, dataclasses are zero instances, sequences are empty,
    enums give their first member and other classes are called without
    arguments. Types with no zero value give None.
    """
    if is_any(tp) or is_optional(tp):
        return None
    if is_aggregate(tp):
        return zero_instance(tp)
    if sequence_element(tp) is not None:
        return sequence_factory(tp)()
    target = supertype(tp)
    target = typing.get_origin(target) or target
    if not isinstance(target, type):
        return None
    if issubclass(target, enum.Enum):
        members = list(target)
        return members[0] if members else None
    if inspect.isabstract(target):
        return None
    try:
        return target()
    except TypeError:
        return None


def zero_instance(cls: type) -> Any:
    """
    Build an instance of dataclass `cls` with every field at its zero value.

    Declared defaults take precedence over zero values.
    """
    hints = type_hints(cls)
    kwargs = {}
    unset = []
    for f in dataclasses.fields(cls):
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        if f.init:
            kwargs[f.name] = zero_value(hints.get(f.name, Any))
        else:
            unset.append(f.name)
    instance = cls(**kwargs)
    for name in unset:
        set_field(instance, name, zero_value(hints.get(name, Any)))
    return instance


def is_frozen(cls: type) -> bool:
    params = getattr(cls, "__dataclass_params__", None)
    return params is not None and params.frozen


def set_field(owner: Any, name: str, value: Any) -> None:
    """Set a dataclass field, bypassing the frozen guard."""
    if is_frozen(type(owner)):
        object.__setattr__(owner, name, value)
    else:
        setattr(owner, name, value)


def writable(value: Any) -> Any:
    """
    Return `value`, or a shallow copy of it if it is a frozen dataclass.

    The original of a frozen aggregate is never mutated; its slot receives
    the copy instead.
    """
    if is_frozen(type(value)):
        return copy.copy(value)
    return value


def ensure_mutable(value: Any) -> None:
    """Raise DestNotAddressableError unless `value` can be mutated in place."""
    if is_frozen(type(value)):
        raise DestNotAddressableError(
            f"{type_name(type(value))} is a frozen dataclass",
            dest_type=type(value),
        )


def leaf_kind(tp: Any) -> Optional[str]:
    """
    Conversion kind of a leaf type.

    Types of the same kind convert to each other. Returns None for types
    that only map onto an identical type.
    """
    target = supertype(tp)
    target = typing.get_origin(target) or target
    if not isinstance(target, type):
        return None
    if issubclass(target, bool):
        return "bool"
    if issubclass(target, str):
        return "str"
    if issubclass(target, (bytes, bytearray)):
        return "bytes"
    if issubclass(target, (numbers.Real, decimal.Decimal)):
        return "number"
    if issubclass(target, Mapping):
        return "mapping"
    return None


def convert_leaf(value: Any, source_type: Any, dest_type: Any) -> Any:
    """
    Convert a leaf value to `dest_type`.

    Raises:
        TypeIncompatibleError: If the kinds differ or the conversion fails
    """
    if is_any(dest_type):
        return value

    if is_union(dest_type):
        for member in typing.get_args(dest_type):
            if isinstance(member, type) and isinstance(value, member):
                return value
        raise TypeIncompatibleError(
            f"value of type {type_name(type(value))} is not a member of the union",
            source_type=source_type,
            dest_type=dest_type,
        )

    source_kind = leaf_kind(source_type)
    dest_kind = leaf_kind(dest_type)
    if source_kind is None or source_kind != dest_kind:
        raise TypeIncompatibleError(
            f"cannot convert {type_name(source_type)} to {type_name(dest_type)}",
            source_type=source_type,
            dest_type=dest_type,
        )

    target = supertype(dest_type)
    target = typing.get_origin(target) or target
    if inspect.isabstract(target):
        target = dict if dest_kind == "mapping" else target
    if isinstance(value, enum.Enum) and not issubclass(target, enum.Enum):
        value = value.value
    try:
        return target(value)
    except (ValueError, TypeError) as e:
        raise TypeIncompatibleError(
            f"cannot convert {value!r} to {type_name(dest_type)}: {e}",
            source_type=source_type,
            dest_type=dest_type,
        ) from e
