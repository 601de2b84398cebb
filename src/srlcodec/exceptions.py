"""Exception hierarchy for srlcodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from SrlError for easy catching of any srlcodec-specific error.
"""

from __future__ import annotations


class SrlError(Exception):
    """Base exception for all srlcodec errors."""

    pass


class ConfigurationError(SrlError, ValueError):
    """Raised when encoder or decoder options are invalid.

    Always raised while constructing a configuration, never at
    encode/decode time.

    Examples:
        - protocol_version outside 0-3
        - compression_level outside 1-9
        - Negative threshold or size limit
    """

    pass


class FormatError(SrlError):
    """Raised when a byte stream does not follow the wire format.

    Examples:
        - Bad magic byte or unknown protocol version
        - Truncated stream
        - Unknown tag byte
        - Varint longer than the 64-bit bound
        - Trailing bytes after the root value
    """

    pass


class EncodeError(FormatError):
    """Raised when a value graph cannot be expressed in the wire format.

    Examples:
        - An object in the graph is not a Value
        - Integer outside the 64-bit encodable range
        - Body exceeds max_body_size
        - User data requested below protocol version 2
    """

    pass


class FramingError(FormatError):
    """Raised when the document header or compression envelope is invalid.

    Examples:
        - Unsupported or refused compression algorithm
        - Decompressed length differs from the header
        - Corrupted compressed payload
    """

    pass


class DanglingReferenceError(FormatError):
    """Raised when a back-reference points to no materialized value.

    The offset either does not fall on the boundary of a value that was
    already consumed or is not strictly before the referencing tag.
    """

    pass


class RecursionLimitError(FormatError):
    """Raised when a value graph nests deeper than the configured bound.

    On encode this usually means a cycle with reference tracking disabled.
    """

    pass
