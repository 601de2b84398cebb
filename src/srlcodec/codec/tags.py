"""Tag byte layout and per-version protocol features.

Each item in a body starts with one tag byte. The low seven bits select the
kind of item, sometimes with a small value inlined; the high bit marks an item
that a later back-reference or alias points to.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import FormatError

# Inline small integers
POS_LOW = 0x00  # 0x00-0x0F: 0..15
POS_HIGH = 0x0F
NEG_LOW = 0x10  # 0x10-0x1F: -16..-1 (tag - 32)
NEG_HIGH = 0x1F

VARINT = 0x20
ZIGZAG = 0x21
FLOAT = 0x22
DOUBLE = 0x23
LONG_DOUBLE = 0x24
UNDEF = 0x25
BINARY = 0x26
STR_UTF8 = 0x27
REFN = 0x28
REFP = 0x29
HASH = 0x2A
ARRAY = 0x2B
OBJECT = 0x2C
OBJECTV = 0x2D
ALIAS = 0x2E
COPY = 0x2F
WEAKEN = 0x30
FALSE = 0x3A
TRUE = 0x3B
PAD = 0x3F

ARRAY_LOW = 0x40  # 0x40-0x4F: sequence with inline count
ARRAY_HIGH = 0x4F
HASH_LOW = 0x50  # 0x50-0x5F: mapping with inline pair count
HASH_HIGH = 0x5F
SHORT_BINARY_LOW = 0x60  # 0x60-0x7F: bytes with inline length
SHORT_BINARY_HIGH = 0x7F

TRACK_FLAG = 0x80
TYPE_MASK = 0x7F

MAX_INLINE_POS = 15
MIN_INLINE_NEG = -16
MAX_INLINE_COUNT = 15
MAX_SHORT_BINARY = 31

MIN_INTEGER = -(1 << 63)
MAX_INTEGER = (1 << 64) - 1

TAG_NAMES: dict[int, str] = {
    VARINT: "VARINT",
    ZIGZAG: "ZIGZAG",
    FLOAT: "FLOAT",
    DOUBLE: "DOUBLE",
    LONG_DOUBLE: "LONG_DOUBLE",
    UNDEF: "UNDEF",
    BINARY: "BINARY",
    STR_UTF8: "STR_UTF8",
    REFN: "REFN",
    REFP: "REFP",
    HASH: "HASH",
    ARRAY: "ARRAY",
    OBJECT: "OBJECT",
    OBJECTV: "OBJECTV",
    ALIAS: "ALIAS",
    COPY: "COPY",
    WEAKEN: "WEAKEN",
    FALSE: "FALSE",
    TRUE: "TRUE",
    PAD: "PAD",
}


def tag_name(tag: int) -> str:
    """Return a readable name for a tag byte (track flag ignored).

    Example:
        >>> tag_name(0x05)
        'POS_5'
        >>> tag_name(0xAB)
        'ARRAY'
    """
    tag &= TYPE_MASK
    if POS_LOW <= tag <= POS_HIGH:
        return f"POS_{tag}"
    if NEG_LOW <= tag <= NEG_HIGH:
        return f"NEG_{32 - tag}"
    if ARRAY_LOW <= tag <= ARRAY_HIGH:
        return f"ARRAY_{tag - ARRAY_LOW}"
    if HASH_LOW <= tag <= HASH_HIGH:
        return f"HASH_{tag - HASH_LOW}"
    if SHORT_BINARY_LOW <= tag <= SHORT_BINARY_HIGH:
        return f"SHORT_BINARY_{tag - SHORT_BINARY_LOW}"
    return TAG_NAMES.get(tag, f"RESERVED_0x{tag:02X}")


@dataclass(frozen=True)
class ProtocolFeatures:
    """What a protocol version allows on the wire.

    Attributes:
        version: Protocol version number
        inline_containers: ARRAY_N / HASH_N tags carry small counts inline
        relative_offsets: Offsets are written as a distance back from the
            referencing tag instead of an absolute body position
        user_data: The header may carry a user-data section
        copy_tags: COPY (repeated string keys) and OBJECTV (repeated class
            names) are available
    """

    version: int
    inline_containers: bool
    relative_offsets: bool
    user_data: bool
    copy_tags: bool

    def encode_offset(self, target: int, referrer: int) -> int:
        """Turn a target offset into the number written after the tag."""
        return referrer - target if self.relative_offsets else target

    def decode_offset(self, raw: int, referrer: int) -> int:
        """Turn the number read after a tag back into a target offset.

        The result may be invalid; callers resolve it through the decode
        table, which rejects anything that is not a consumed value boundary.
        """
        return referrer - raw if self.relative_offsets else raw

    def allows(self, tag: int) -> bool:
        """Return True if ``tag`` (track flag ignored) exists in this version."""
        tag &= TYPE_MASK
        if ARRAY_LOW <= tag <= HASH_HIGH:
            return self.inline_containers
        if tag in (COPY, OBJECTV):
            return self.copy_tags
        return True


PROTOCOLS: dict[int, ProtocolFeatures] = {
    0: ProtocolFeatures(0, inline_containers=False, relative_offsets=False, user_data=False, copy_tags=False),
    1: ProtocolFeatures(1, inline_containers=True, relative_offsets=False, user_data=False, copy_tags=False),
    2: ProtocolFeatures(2, inline_containers=True, relative_offsets=True, user_data=True, copy_tags=False),
    3: ProtocolFeatures(3, inline_containers=True, relative_offsets=True, user_data=True, copy_tags=True),
}


def features_for(version: int) -> ProtocolFeatures:
    """Return the feature set of a protocol version.

    Raises:
        FormatError: If the version is unknown
    """
    try:
        return PROTOCOLS[version]
    except KeyError:
        raise FormatError(f"Unsupported protocol version {version}") from None
