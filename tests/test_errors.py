"""
Tests for mapping error reporting.
"""

from dataclasses import dataclass, field

import pytest

from automapper import (
    DestNotAddressableError,
    FieldResolutionError,
    MappingError,
    TypeIncompatibleError,
    map_to_destination,
)
from automapper.errors import type_name

from .fixtures import DestTypeA


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "cls,kind",
        [
            (DestNotAddressableError, "DestNotAddressable"),
            (FieldResolutionError, "FieldResolution"),
            (TypeIncompatibleError, "TypeIncompatible"),
        ],
    )
    def test_kinds(self, cls, kind):
        assert issubclass(cls, MappingError)
        assert cls.kind == kind


class TestErrorMessages:
    """Tests for error formatting."""

    def test_plain_message(self):
        assert str(MappingError("boom")) == "boom"

    def test_full_message(self):
        error = FieldResolutionError(
            "source has no field named 'b'", field="b", source_type=int, dest_type=DestTypeA
        )
        error.push_field("child")
        assert error.field == "child.b"
        assert str(error) == (
            "Error mapping field: child.b. DestType: DestTypeA. SourceType: int. "
            "Error: source has no field named 'b'"
        )

    def test_index_path(self):
        error = TypeIncompatibleError("bad")
        for part in ["foo", "[2]", "items"]:
            error.push_field(part)
        assert error.field == "items[2].foo"

    def test_type_names(self):
        assert type_name(int) == "int"
        assert type_name(list[int]) == "list[int]"
        assert type_name(None) == "None"

    def test_raised_error_names_field_and_types(self):
        """Errors from a mapping call carry the field and both type names."""

        @dataclass
        class ChildSource:
            foo: str = ""

        @dataclass
        class Source:
            child: ChildSource = field(default_factory=ChildSource)

        @dataclass
        class Child:
            foo: int = 0

        @dataclass
        class Dest:
            child: Child = field(default_factory=Child)

        with pytest.raises(TypeIncompatibleError) as exc_info:
            map_to_destination(Source(child=ChildSource(foo="x")), Dest())

        error = exc_info.value
        assert error.field == "child.foo"
        assert error.source_type == "str"
        assert error.dest_type == "int"
        assert "Error mapping field: child.foo" in str(error)
