"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from srlcodec import (
    NULL,
    TRUE,
    Bytes,
    Float,
    Integer,
    Mapping,
    ObjectMarker,
    Sequence,
    String,
    Value,
)


@pytest.fixture
def sample_value() -> Value:
    """Acyclic value graph touching every value type."""
    return Mapping(
        [
            (String("vehicle"), String("auv-7")),
            (String("depth_cm"), Integer(1500)),
            (String("offset"), Integer(-40000)),
            (String("heading"), Float(271.5)),
            (String("active"), TRUE),
            (String("fault"), NULL),
            (String("blob"), Bytes(b"\x00\x01\x02" * 20)),
            (String("readings"), Sequence([Integer(i) for i in range(-3, 20)])),
            (String("status"), ObjectMarker("Status", Mapping([(String("ok"), TRUE)]))),
        ]
    )


@pytest.fixture
def compressible_value() -> Value:
    """Value whose body is large and highly repetitive."""
    return Sequence([String("underwater acoustic telemetry") for _ in range(200)])
