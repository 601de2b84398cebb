"""Unit tests for reference tracking tables."""

from __future__ import annotations

import pytest

from srlcodec import DanglingReferenceError, FormatError, Integer, Sequence
from srlcodec.codec.tracker import DecodeTable, EncodeTracker


class TestEncodeTracker:
    """Test identity tracking on the encoder side."""

    def test_first_sight_records(self) -> None:
        """Test a new object is recorded and reported unseen."""
        tracker = EncodeTracker()
        value = Sequence()

        assert tracker.record_if_seen(value, 4) is None
        assert len(tracker) == 1

    def test_second_sight_returns_offset(self) -> None:
        """Test the same object returns its first offset."""
        tracker = EncodeTracker()
        value = Sequence()
        tracker.record_if_seen(value, 4)

        assert tracker.record_if_seen(value, 10) == 4
        assert tracker.record_if_seen(value, 20) == 4

    def test_identity_not_equality(self) -> None:
        """Test equal but distinct objects are tracked separately."""
        tracker = EncodeTracker()
        tracker.record_if_seen(Sequence([Integer(1)]), 0)

        assert tracker.record_if_seen(Sequence([Integer(1)]), 5) is None
        assert len(tracker) == 2

    def test_string_offsets(self) -> None:
        """Test string dedupe is by contents."""
        tracker = EncodeTracker()
        assert tracker.string_offset("key", 3) is None
        assert tracker.string_offset("key", 9) == 3
        assert tracker.string_offset("other", 12) is None

    def test_class_name_offsets(self) -> None:
        """Test class names are remembered at their first offset."""
        tracker = EncodeTracker()
        assert tracker.class_name_offset("Point", 1) is None
        assert tracker.class_name_offset("Point", 30) == 1


class TestDecodeTable:
    """Test offset resolution on the decoder side."""

    def test_resolve_recorded(self) -> None:
        """Test resolving returns the very object recorded."""
        table = DecodeTable()
        value = Sequence()
        table.record(0, value)

        assert table.resolve(0, referrer=5) is value

    def test_forward_reference(self) -> None:
        """Test a target at or after the referrer is rejected."""
        table = DecodeTable()
        table.record(5, Sequence())

        with pytest.raises(DanglingReferenceError, match="not before"):
            table.resolve(5, referrer=5)
        with pytest.raises(DanglingReferenceError, match="not before"):
            table.resolve(7, referrer=5)

    def test_not_a_boundary(self) -> None:
        """Test an offset inside a value is rejected."""
        table = DecodeTable()
        table.record(0, Sequence())

        with pytest.raises(DanglingReferenceError, match="no value starts"):
            table.resolve(1, referrer=5)

    def test_negative_offset(self) -> None:
        """Test negative offsets are rejected."""
        with pytest.raises(DanglingReferenceError):
            DecodeTable().resolve(-1, referrer=3)

    def test_dangling_is_format_error(self) -> None:
        """Test dangling references are format errors."""
        with pytest.raises(FormatError):
            DecodeTable().resolve(0, referrer=1)
