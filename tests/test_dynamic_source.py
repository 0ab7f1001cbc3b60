"""
Tests for patching dataclasses from dicts (map_from_source_map).
"""

from dataclasses import dataclass, field
from typing import Any, Optional

import pytest

import automapper
from automapper import DestNotAddressableError, TypeIncompatibleError, map_from_source_map

from .fixtures import ChildDest, ChildSource, DestParent, DestTypeA, FrozenDest, UserModel


@dataclass
class PatchTarget:
    foo: str = ""
    bar: str = ""
    child: ChildDest = field(default_factory=ChildDest)


class TestMapFromSourceMap:
    """Tests for the key-driven, loose entry point."""

    def test_unmentioned_fields_are_preserved(self):
        """Keys patch their fields; other fields keep their value."""
        dest = PatchTarget(bar="123")

        map_from_source_map({"foo": "abc", "child": {"foo": "456"}}, dest)

        assert dest.foo == "abc", "should map direct field"
        assert dest.bar == "123", "field should not be overwritten"
        assert dest.child == ChildDest(foo="456", bar=""), "nested dict should patch"

    def test_dataclass_values(self):
        """A dataclass value is mapped loosely onto the nested field."""
        dest = PatchTarget(bar="123", child=ChildDest(bar="kept"))

        map_from_source_map({"foo": "abc", "child": ChildSource(foo="456")}, dest)

        assert dest.foo == "abc"
        assert dest.bar == "123"
        assert dest.child.foo == "456"
        assert dest.child.bar == "kept"

    def test_unknown_keys_are_ignored(self):
        dest = map_from_source_map({"foo": 1, "nope": "x"}, DestTypeA())
        assert dest == DestTypeA(foo=1)

    def test_skipped_fields_are_not_written(self):
        """A key naming a skipped field is ignored."""

        @dataclass
        class Dest:
            secret: str = automapper.field("-", default="hidden")

        dest = map_from_source_map({"secret": "leaked"}, Dest())
        assert dest.secret == "hidden"

    def test_values_are_converted(self):
        """Values convert to the declared field type."""

        @dataclass
        class Dest:
            ratio: float = 0.0
            note: Optional[str] = "set"

        dest = map_from_source_map({"ratio": 3, "note": None}, Dest())
        assert dest.ratio == 3.0
        assert dest.note is None

    def test_list_of_dicts(self):
        """Lists of dicts become lists of dataclasses."""
        dest = map_from_source_map(
            {"children": [{"foo": 1}, {"foo": 2, "bar": "b"}]}, DestParent()
        )
        assert dest.children == [DestTypeA(foo=1), DestTypeA(foo=2, bar="b")]

    def test_renamed_fields(self):
        """Keys may name a field by its rename directive."""
        dest = map_from_source_map({"username": "ada", "age": 36}, UserModel())

        assert dest.name == "ada"
        assert dest.age == 36.0

    def test_nested_frozen_field(self):
        """A nested dict patches a copy of a frozen child."""

        @dataclass
        class Dest:
            child: FrozenDest = field(default_factory=FrozenDest)

        original = FrozenDest(bar="kept")
        dest = map_from_source_map({"child": {"foo": 4}}, Dest(child=original))

        assert dest.child == FrozenDest(foo=4, bar="kept")
        assert original.foo == 0

    def test_promoted_fields(self):
        """Keys may name fields promoted through embedded aggregates."""

        @dataclass
        class Dest:
            a: DestTypeA = automapper.field(embedded=True, default_factory=DestTypeA)

        dest = map_from_source_map({"foo": 5}, Dest())
        assert dest.a.foo == 5

    def test_invalid_value_raises_with_key(self):
        """Conversion failures name the offending key."""
        with pytest.raises(TypeIncompatibleError) as exc_info:
            map_from_source_map({"foo": "not a number"}, DestTypeA())
        assert exc_info.value.field == "foo"

    def test_non_string_keys_raise(self):
        with pytest.raises(TypeIncompatibleError):
            map_from_source_map({1: "x"}, DestTypeA())

    def test_non_mapping_source_raises(self):
        source: Any = [("foo", 1)]
        with pytest.raises(TypeIncompatibleError):
            map_from_source_map(source, DestTypeA())

    @pytest.mark.parametrize("dest", [DestTypeA, FrozenDest(), {}])
    def test_rejects_non_mutable_destination(self, dest):
        with pytest.raises(DestNotAddressableError):
            map_from_source_map({"foo": 1}, dest)
