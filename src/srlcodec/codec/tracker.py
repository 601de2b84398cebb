"""Reference tracking for the encoder and decoder.

The encoder side maps object identity to the body offset at which the object
was first written. The decoder side maps body offsets to the values
materialized there. Both tables live for exactly one encode or decode call.
"""

from __future__ import annotations

from typing import Optional

from ..exceptions import DanglingReferenceError
from ..models.values import Value


class EncodeTracker:
    """Identity and string tables for one encode call.

    Example:
        >>> tracker = EncodeTracker()
        >>> shared = Sequence()
        >>> tracker.record_if_seen(shared, 0) is None
        True
        >>> tracker.record_if_seen(shared, 7)
        0
    """

    def __init__(self) -> None:
        # id() -> (offset, value); the value is held so the id stays unique
        self._seen: dict[int, tuple[int, Value]] = {}
        self._strings: dict[str, int] = {}
        self._class_names: dict[str, int] = {}

    def record_if_seen(self, value: Value, offset: int) -> Optional[int]:
        """Return the earlier offset of ``value``, or record it at ``offset``.

        Args:
            value: Object about to be written
            offset: Body offset its tag would be written at

        Returns:
            The offset recorded for this exact object, or None if this is the
            first time it is seen (it is recorded before returning)
        """
        entry = self._seen.get(id(value))
        if entry is not None:
            return entry[0]
        self._seen[id(value)] = (offset, value)
        return None

    def string_offset(self, text: str, offset: int) -> Optional[int]:
        """Return the offset of an earlier string with the same contents.

        Records ``offset`` when the string has not been written yet.
        """
        earlier = self._strings.get(text)
        if earlier is None:
            self._strings[text] = offset
        return earlier

    def class_name_offset(self, name: str, offset: int) -> Optional[int]:
        """Return the offset of an earlier class name string, or record it."""
        earlier = self._class_names.get(name)
        if earlier is None:
            self._class_names[name] = offset
        return earlier

    def __len__(self) -> int:
        return len(self._seen)


class DecodeTable:
    """Offset-to-value table for one decode call."""

    def __init__(self) -> None:
        self._values: dict[int, Value] = {}

    def record(self, offset: int, value: Value) -> None:
        """Register the value whose tag starts at ``offset``.

        Compound values are registered before their children are read, so a
        child may resolve to a parent that is still being filled in.
        """
        self._values[offset] = value

    def resolve(self, offset: int, referrer: int) -> Value:
        """Return the value previously materialized at ``offset``.

        Args:
            offset: Target body offset
            referrer: Offset of the tag doing the referring

        Raises:
            DanglingReferenceError: If the target is not strictly before the
                referrer or no value starts there
        """
        if offset < 0 or offset >= referrer:
            raise DanglingReferenceError(
                f"Reference at offset {referrer} points to offset {offset}, "
                f"which is not before it"
            )
        try:
            return self._values[offset]
        except KeyError:
            raise DanglingReferenceError(
                f"Reference at offset {referrer} points to offset {offset}, "
                f"where no value starts"
            ) from None

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, offset: object) -> bool:
        return offset in self._values
