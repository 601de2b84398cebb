"""Value model for srlcodec.

Every encodable shape is one of the classes below. The set is closed: the
encoder and decoder dispatch on exactly these types and reject anything else.

Scalars are frozen dataclasses compared by value. Compound values are mutable
so that the decoder can register a container before its children are read,
which is what lets a child refer back to a partially built parent. Their
``==`` is a structural comparison that tolerates cycles.

Reference tracking never uses ``==``: two equal but distinct Sequence
instances are separate objects on the wire unless the caller shares one
instance.

Example:
    >>> shared = Sequence([Integer(1), Integer(2)])
    >>> root = Sequence([shared, shared])
    >>> loop = Sequence()
    >>> loop.items.append(Reference(loop))
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Iterator, Optional


class Value:
    """Base class of every encodable shape."""

    __slots__ = ()


@dataclass(frozen=True)
class Null(Value):
    """The absence of a value."""


@dataclass(frozen=True)
class Boolean(Value):
    value: bool


@dataclass(frozen=True)
class Integer(Value):
    """Signed integer, encodable in the range [-2**63, 2**64 - 1]."""

    value: int


@dataclass(frozen=True, eq=False)
class Float(Value):
    """IEEE-754 double. Two NaNs compare equal so that a NaN round-trips."""

    value: float

    def __eq__(self, other: object) -> bool:
        if type(other) is not Float:
            return NotImplemented
        if math.isnan(self.value) and math.isnan(other.value):
            return True
        return self.value == other.value

    def __hash__(self) -> int:
        if math.isnan(self.value):
            return hash((Float, "nan"))
        return hash((Float, self.value))


@dataclass(frozen=True)
class Bytes(Value):
    """Arbitrary binary data (may contain NUL bytes)."""

    value: bytes


@dataclass(frozen=True)
class String(Value):
    """Text, carried as UTF-8 on the wire."""

    value: str


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)

SCALAR_TYPES = (Null, Boolean, Integer, Float, Bytes, String)


class ReferenceKind(enum.Enum):
    """Strength of a Reference."""

    STRONG = "strong"
    WEAK = "weak"


@dataclass(eq=False)
class Sequence(Value):
    """Ordered list of values."""

    items: list[Value] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        return values_equal(self, other)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    __hash__ = None  # type: ignore[assignment]


@dataclass(eq=False)
class Mapping(Value):
    """Ordered list of (key, value) pairs.

    Keys are not required to be unique; the order of pairs is preserved.
    """

    pairs: list[tuple[Value, Value]] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        return values_equal(self, other)

    def __len__(self) -> int:
        return len(self.pairs)

    def get(self, key: Value, default: Optional[Value] = None) -> Optional[Value]:
        """Return the value of the first pair whose key equals ``key``."""
        for k, v in self.pairs:
            if values_equal(k, key):
                return v
        return default

    __hash__ = None  # type: ignore[assignment]


@dataclass(eq=False)
class Reference(Value):
    """A reference to another value.

    ``target`` is None only while a decoder is still building the reference.
    """

    target: Optional[Value] = None
    kind: ReferenceKind = ReferenceKind.STRONG

    @property
    def weak(self) -> bool:
        return self.kind is ReferenceKind.WEAK

    def __eq__(self, other: object) -> bool:
        return values_equal(self, other)

    __hash__ = None  # type: ignore[assignment]


@dataclass(eq=False)
class ObjectMarker(Value):
    """A payload tagged with a class name (a "blessed" value)."""

    class_name: str = ""
    payload: Optional[Value] = None

    def __eq__(self, other: object) -> bool:
        return values_equal(self, other)

    __hash__ = None  # type: ignore[assignment]


COMPOUND_TYPES = (Sequence, Mapping, Reference, ObjectMarker)


def weak(target: Value) -> Reference:
    """Shorthand for a weak Reference to ``target``."""
    return Reference(target, ReferenceKind.WEAK)


def values_equal(left: object, right: object) -> bool:
    """Compare two value graphs structurally.

    Cycles are handled by assuming a pair of compound nodes equal while it is
    being compared, so two graphs with the same shape of cycle are equal.

    Args:
        left: First value
        right: Second value

    Returns:
        True if both graphs have the same shape and scalar contents
    """
    return _equal(left, right, set())


def _equal(left: object, right: object, assumed: set[tuple[int, int]]) -> bool:
    if left is right:
        return True
    if type(left) is not type(right):
        return False
    if not isinstance(left, COMPOUND_TYPES):
        return left == right

    pair = (id(left), id(right))
    if pair in assumed:
        return True
    assumed.add(pair)

    if isinstance(left, Sequence):
        assert isinstance(right, Sequence)
        return len(left.items) == len(right.items) and all(
            _equal(a, b, assumed) for a, b in zip(left.items, right.items)
        )

    if isinstance(left, Mapping):
        assert isinstance(right, Mapping)
        return len(left.pairs) == len(right.pairs) and all(
            _equal(ka, kb, assumed) and _equal(va, vb, assumed)
            for (ka, va), (kb, vb) in zip(left.pairs, right.pairs)
        )

    if isinstance(left, Reference):
        assert isinstance(right, Reference)
        return left.kind is right.kind and _equal(left.target, right.target, assumed)

    assert isinstance(left, ObjectMarker) and isinstance(right, ObjectMarker)
    return left.class_name == right.class_name and _equal(left.payload, right.payload, assumed)
