"""Body compression for srlcodec documents.

Two algorithms are supported:
- Snappy raw block (fast, no tunable level), via python-snappy
- Raw deflate stream (general purpose, level 1-9), via zlib

A body is only stored compressed when it reaches the configured threshold and
compression actually makes it smaller. The decoder always follows the header
flag, never the encoder's configuration.
"""

from __future__ import annotations

import logging
import zlib

import snappy

from ..codec.varint import ByteReader
from ..config import CompressionType, DecoderConfig, EncoderConfig
from ..exceptions import FormatError, FramingError

logger = logging.getLogger(__name__)

DEFLATE_WBITS = -15  # raw deflate, no zlib header or checksum


def compress_body(body: bytes, config: EncoderConfig) -> tuple[CompressionType, bytes]:
    """Compress a body if the configuration asks for it and it pays off.

    Args:
        body: Encoded tagged body
        config: Encoder configuration

    Returns:
        Tuple of (compression actually applied, payload). The payload is the
        body itself when the compression is NONE.

    Example:
        >>> config = EncoderConfig(compression_type=CompressionType.ZLIB, compression_threshold=0)
        >>> kind, payload = compress_body(b"a" * 100, config)
        >>> kind
        <CompressionType.ZLIB: 2>
    """
    requested = config.compression_type
    if requested is CompressionType.NONE:
        return CompressionType.NONE, body

    if len(body) < config.compression_threshold:
        logger.debug(
            "Body of %d bytes is below compression threshold %d; storing raw",
            len(body),
            config.compression_threshold,
        )
        return CompressionType.NONE, body

    if requested is CompressionType.SNAPPY:
        payload = snappy.compress(body)
    else:
        compressor = zlib.compressobj(config.compression_level, zlib.DEFLATED, DEFLATE_WBITS)
        payload = compressor.compress(body) + compressor.flush()

    if len(payload) >= len(body):
        logger.debug(
            "%s did not shrink the body (%d -> %d bytes); storing raw",
            requested.name,
            len(body),
            len(payload),
        )
        return CompressionType.NONE, body

    logger.debug("Compressed body with %s: %d -> %d bytes", requested.name, len(body), len(payload))
    return requested, payload


def decompress_body(
    compression: CompressionType,
    payload: bytes,
    expected_length: int,
    config: DecoderConfig,
) -> bytes:
    """Decompress a body according to the header.

    Args:
        compression: Compression declared by the header
        payload: Compressed body
        expected_length: Uncompressed length declared by the header
        config: Decoder configuration

    Returns:
        The uncompressed body

    Raises:
        FramingError: If the algorithm is refused, the payload is corrupt or
            truncated, or the result does not have the declared length
    """
    if config.max_uncompressed_size and expected_length > config.max_uncompressed_size:
        raise FramingError(
            f"Declared uncompressed size {expected_length} exceeds "
            f"max_uncompressed_size={config.max_uncompressed_size}"
        )

    if compression is CompressionType.SNAPPY:
        if config.refuse_snappy:
            raise FramingError("Snappy-compressed document refused by decoder configuration")
        body = _snappy_decompress(payload, expected_length)
    elif compression is CompressionType.ZLIB:
        if config.refuse_zlib:
            raise FramingError("zlib-compressed document refused by decoder configuration")
        body = _deflate_decompress(payload, expected_length)
    else:
        raise FramingError(f"Unsupported compression type {compression!r}")

    if len(body) != expected_length:
        raise FramingError(
            f"Length mismatch: header says {expected_length} bytes, "
            f"decompressed {len(body)} bytes"
        )
    return body


def _snappy_decompress(payload: bytes, expected_length: int) -> bytes:
    # A raw Snappy block starts with its uncompressed length as a varint
    try:
        declared = ByteReader(payload).read_varint()
    except FormatError as e:
        raise FramingError(f"Corrupted Snappy payload: {e}") from e
    if declared != expected_length:
        raise FramingError(
            f"Length mismatch: header says {expected_length} bytes, "
            f"Snappy block says {declared} bytes"
        )

    try:
        return bytes(snappy.decompress(payload))
    except (snappy.UncompressError, MemoryError) as e:
        raise FramingError(f"Corrupted Snappy payload: {e}") from e


def _deflate_decompress(payload: bytes, expected_length: int) -> bytes:
    decompressor = zlib.decompressobj(DEFLATE_WBITS)
    try:
        # One byte of slack exposes streams longer than declared
        body = decompressor.decompress(payload, expected_length + 1)
    except (zlib.error, OverflowError) as e:
        raise FramingError(f"Corrupted deflate payload: {e}") from e

    if len(body) > expected_length or decompressor.unconsumed_tail:
        raise FramingError(
            f"Length mismatch: deflate stream is longer than the declared {expected_length} bytes"
        )
    if not decompressor.eof:
        raise FramingError("Truncated deflate payload")
    if decompressor.unused_data:
        raise FramingError(
            f"Trailing data after deflate stream: {len(decompressor.unused_data)} bytes"
        )
    return body
