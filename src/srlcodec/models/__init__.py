"""Value model for srlcodec.

This module provides the closed set of value classes the codec operates on.
"""

from __future__ import annotations

from .values import (
    FALSE,
    NULL,
    TRUE,
    Boolean,
    Bytes,
    Float,
    Integer,
    Mapping,
    Null,
    ObjectMarker,
    Reference,
    ReferenceKind,
    Sequence,
    String,
    Value,
    values_equal,
    weak,
)

__all__ = [
    "Value",
    "Null",
    "Boolean",
    "Integer",
    "Float",
    "Bytes",
    "String",
    "Sequence",
    "Mapping",
    "Reference",
    "ReferenceKind",
    "ObjectMarker",
    "NULL",
    "TRUE",
    "FALSE",
    "weak",
    "values_equal",
]
