"""Document size calculation utilities.

This module provides functions to measure how large a value graph is on the
wire under a given configuration.
"""

from __future__ import annotations

from typing import Optional

from ..codec.encoder import encode
from ..codec.varint import varint_length
from ..config import CompressionType, EncoderConfig
from ..framing.header import read_header
from ..models.values import Value


def encoded_size(value: Value, config: Optional[EncoderConfig] = None) -> int:
    """Calculate the size of the complete document in bytes.

    Includes the header and reflects any compression the configuration
    applies.

    Args:
        value: Root of the value graph
        config: Encoder configuration (defaults to ``EncoderConfig()``)

    Returns:
        Document size in bytes

    Raises:
        EncodeError: If the graph cannot be encoded
        RecursionLimitError: If the graph nests too deeply

    Example:
        >>> encoded_size(Integer(5))
        4  # 3 header bytes + 1 tag byte
    """
    return len(encode(value, config))


def body_size(value: Value, config: Optional[EncoderConfig] = None) -> int:
    """Calculate the size of the uncompressed body in bytes.

    This is the length that the compression threshold is compared against.

    Args:
        value: Root of the value graph
        config: Encoder configuration (compression settings are ignored)

    Returns:
        Body size in bytes

    Example:
        >>> body_size(Sequence([Integer(1), Integer(2)]))
        3  # ARRAY_2 + two inline integers
    """
    if config is None:
        config = EncoderConfig()
    uncompressed = config.replace(compression_type=CompressionType.NONE)
    document = encode(value, uncompressed)
    return len(document) - read_header(document).body_offset


__all__ = ["encoded_size", "body_size", "varint_length"]
