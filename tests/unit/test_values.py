"""Unit tests for the value model."""

from __future__ import annotations

import math

from srlcodec import (
    NULL,
    TRUE,
    Boolean,
    Float,
    Integer,
    Mapping,
    Null,
    ObjectMarker,
    Reference,
    ReferenceKind,
    Sequence,
    String,
    values_equal,
    weak,
)


class TestScalars:
    """Test scalar value semantics."""

    def test_value_equality(self) -> None:
        """Test scalars compare by value."""
        assert Integer(5) == Integer(5)
        assert String("a") == String("a")
        assert Null() == NULL
        assert Boolean(True) == TRUE

    def test_float_nan_equality(self) -> None:
        """Test NaN floats compare equal and hash alike."""
        assert Float(math.nan) == Float(float("nan"))
        assert hash(Float(math.nan)) == hash(Float(float("nan")))
        assert Float(math.nan) != Float(0.0)
        assert Float(0.0) == Float(-0.0)
        assert Float(1.5) != Integer(1)

    def test_types_are_distinct(self) -> None:
        """Test equal payloads of different types are not equal."""
        assert Integer(1) != Boolean(True)
        assert not values_equal(Integer(0), NULL)


class TestCompound:
    """Test compound value semantics."""

    def test_structural_equality(self) -> None:
        """Test distinct but identical sequences compare equal."""
        a = Sequence([Integer(1), String("x")])
        b = Sequence([Integer(1), String("x")])
        assert a == b
        assert a is not b

    def test_mapping_order_matters(self) -> None:
        """Test mappings are ordered pair lists."""
        a = Mapping([(String("a"), Integer(1)), (String("b"), Integer(2))])
        b = Mapping([(String("b"), Integer(2)), (String("a"), Integer(1))])
        assert a != b

    def test_mapping_get(self) -> None:
        """Test key lookup by structural equality."""
        m = Mapping([(String("a"), Integer(1)), (String("a"), Integer(2))])
        assert m.get(String("a")) == Integer(1)
        assert m.get(String("missing")) is None

    def test_reference_kind(self) -> None:
        """Test strong and weak references differ."""
        target = Sequence()
        assert Reference(target) != weak(target)
        assert weak(target).kind is ReferenceKind.WEAK
        assert weak(target).weak

    def test_object_marker(self) -> None:
        """Test object markers compare class name and payload."""
        assert ObjectMarker("Point", Integer(1)) == ObjectMarker("Point", Integer(1))
        assert ObjectMarker("Point", Integer(1)) != ObjectMarker("Vector", Integer(1))

    def test_cyclic_equality(self) -> None:
        """Test two self-referential sequences compare equal."""
        a = Sequence([Integer(1)])
        a.items.append(Reference(a))
        b = Sequence([Integer(1)])
        b.items.append(Reference(b))

        assert a == b

    def test_cyclic_inequality(self) -> None:
        """Test cycles with different contents compare unequal."""
        a = Sequence([Integer(1)])
        a.items.append(a)
        b = Sequence([Integer(2)])
        b.items.append(b)

        assert a != b

    def test_cyclic_repr(self) -> None:
        """Test repr terminates on cycles."""
        a = Sequence()
        a.items.append(a)
        assert "Sequence" in repr(a)

    def test_unhashable(self) -> None:
        """Test mutable compound values are not hashable."""
        try:
            hash(Sequence())
        except TypeError:
            pass
        else:
            raise AssertionError("Sequence should not be hashable")
