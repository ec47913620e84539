"""
Tests for values — Lookup, fill, unification and conversions
"""

import pytest

from cuesh.lang.values import (
    Bottom, ListValue, Scalar, Struct, Top, TypeValue,
    from_python, nest, to_python, unify,
)


class TestLookup:
    """Path navigation."""

    def test_nested_lookup(self):
        """Labels navigate nested structs."""
        value = from_python({"a": {"b": 1}})
        assert value.lookup(["a", "b"]) == Scalar(1)

    def test_missing_label(self):
        """A missing label is None, not an error."""
        assert from_python({"a": 1}).lookup(["b"]) is None

    def test_through_non_struct(self):
        """Navigating into a scalar is None."""
        assert from_python({"a": 1}).lookup(["a", "b"]) is None

    def test_empty_path(self):
        """The empty path is the value itself."""
        value = from_python({"a": 1})
        assert value.lookup([]) is value

    def test_exists(self):
        """exists() mirrors lookup()."""
        value = from_python({"a": {"b": None}})
        assert value.exists(["a", "b"])
        assert not value.exists(["a", "c"])


class TestFill:
    """Placing a value at a path."""

    def test_fill_empty_struct(self):
        """Filling an empty struct nests the value."""
        filled = Struct().fill(Scalar(1), ["a", "b"])
        assert to_python(filled) == {"a": {"b": 1}}

    def test_fill_conflict(self):
        """Filling over a different value is an error value."""
        filled = from_python({"a": 1}).fill(Scalar(2), ["a"])
        assert filled.first_error() is not None

    def test_nest(self):
        """nest wraps in one struct per label."""
        assert nest(["x"], Scalar(1)) == Struct((("x", Scalar(1)),))


class TestUnify:
    """Unification rules."""

    def test_top_is_identity(self):
        """`_` unifies to the other side."""
        assert unify(Top(), Scalar(1)) == Scalar(1)
        assert unify(Scalar(1), Top()) == Scalar(1)

    def test_bottom_absorbs(self):
        """Errors win."""
        assert isinstance(unify(Bottom("x"), Scalar(1)), Bottom)

    def test_number_narrows(self):
        """number & int is int."""
        assert unify(TypeValue("number"), TypeValue("int")) == TypeValue("int")

    def test_structs_merge(self):
        """Struct fields merge, shared labels unify."""
        merged = unify(from_python({"a": 1}), from_python({"b": 2, "a": 1}))
        assert to_python(merged) == {"a": 1, "b": 2}

    def test_list_length_mismatch(self):
        """Lists of different length conflict."""
        result = unify(from_python([1]), from_python([1, 2]))
        assert isinstance(result, Bottom)

    def test_int_and_float_differ(self):
        """1 and 1.0 are different kinds."""
        assert isinstance(unify(Scalar(1), Scalar(1.0)), Bottom)


class TestEquality:
    """Structural equality."""

    def test_struct_order_insensitive(self):
        """Field order does not affect equality."""
        assert from_python({"a": 1, "b": 2}) == from_python({"b": 2, "a": 1})

    def test_bool_is_not_int(self):
        """true is not 1."""
        assert Scalar(True) != Scalar(1)


class TestConversion:
    """Python data conversion."""

    def test_round_trip(self):
        """Plain data survives from_python/to_python."""
        data = {"a": [1, 2.5, "x", None, True], "b": {}}
        assert to_python(from_python(data)) == data

    def test_non_concrete_to_python(self):
        """Types are not data."""
        with pytest.raises(ValueError):
            to_python(TypeValue("int"))

    def test_unsupported_python_type(self):
        """Arbitrary objects are rejected."""
        with pytest.raises(TypeError):
            from_python(object())

    def test_list_value_equality(self):
        """Lists compare element-wise."""
        assert ListValue((Scalar(1),)) == from_python([1])
