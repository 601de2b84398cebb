"""Unit tests for document headers and body compression."""

from __future__ import annotations

import random
import zlib

import pytest
import snappy

from srlcodec import (
    Bytes,
    CompressionType,
    DecoderConfig,
    EncoderConfig,
    FramingError,
    Integer,
    body_size,
    decode,
    encode,
    read_header,
)
from srlcodec.framing import compress_body, decompress_body, frame_document, unframe_document
from srlcodec.framing.header import write_header

SNAPPY = EncoderConfig(compression_type=CompressionType.SNAPPY)
ZLIB = EncoderConfig(compression_type=CompressionType.ZLIB)


class TestHeader:
    """Test header layout."""

    def test_plain_header(self) -> None:
        """Test an uncompressed header is three bytes."""
        assert write_header(3, CompressionType.NONE) == b"=\x03\x00"
        assert write_header(0, CompressionType.NONE) == b"=\x00\x00"

    def test_compressed_header(self) -> None:
        """Test the uncompressed length follows the flags."""
        header = write_header(2, CompressionType.ZLIB, uncompressed_length=300)
        assert header == b"=\x02\x02\xac\x02"

    def test_compressed_header_needs_length(self) -> None:
        """Test a compressed header without a length."""
        with pytest.raises(ValueError):
            write_header(3, CompressionType.SNAPPY)

    def test_read_header(self) -> None:
        """Test parsing a plain header."""
        header = read_header(b"=\x03\x00\x05")

        assert header.version == 3
        assert header.compression is CompressionType.NONE
        assert header.uncompressed_length is None
        assert header.body_offset == 3
        assert not header.has_user_data

    def test_read_user_data_header(self) -> None:
        """Test parsing a header with user data."""
        header = read_header(b"=\x03\x04\x02\x42\x01\x05")

        assert header.user_data == b"\x42\x01"
        assert header.body_offset == 6

    def test_truncated_header(self) -> None:
        """Test headers cut short."""
        with pytest.raises(FramingError):
            read_header(b"=")
        with pytest.raises(FramingError, match="Truncated header"):
            read_header(b"=\x03\x02")
        with pytest.raises(FramingError, match="Truncated header"):
            read_header(b"=\x03\x04\x05\x01")


class TestFrameDocument:
    """Test framing helpers."""

    def test_frame_and_unframe(self) -> None:
        """Test a raw body passes through unchanged."""
        document = frame_document(b"\x42\x01\x02", EncoderConfig())
        header, body = unframe_document(document, DecoderConfig())

        assert document == b"=\x03\x00\x42\x01\x02"
        assert header.version == 3
        assert body == b"\x42\x01\x02"

    def test_version_written(self) -> None:
        """Test the configured protocol version lands in the header."""
        document = frame_document(b"\x05", EncoderConfig(protocol_version=1))
        assert document[:2] == b"=\x01"


class TestCompression:
    """Test body compression."""

    @pytest.mark.parametrize("compression", [CompressionType.SNAPPY, CompressionType.ZLIB])
    def test_round_trip(self, compression: CompressionType, compressible_value) -> None:
        """Test compressed documents decode to the original value."""
        config = EncoderConfig(compression_type=compression)
        data = encode(compressible_value, config)
        header = read_header(data)

        assert header.compression is compression
        assert header.uncompressed_length == body_size(compressible_value, config)
        assert len(data) < body_size(compressible_value, config)
        assert decode(data) == compressible_value

    def test_below_threshold_stored_raw(self) -> None:
        """Test small bodies are not compressed."""
        data = encode(Integer(5), SNAPPY)
        assert data == b"=\x03\x00\x05"

    def test_threshold_is_inclusive(self, compressible_value) -> None:
        """Test a body exactly at the threshold is compressed."""
        size = body_size(compressible_value)
        at = encode(compressible_value, ZLIB.replace(compression_threshold=size))
        above = encode(compressible_value, ZLIB.replace(compression_threshold=size + 1))

        assert read_header(at).compression is CompressionType.ZLIB
        assert read_header(above).compression is CompressionType.NONE

    def test_incompressible_stored_raw(self) -> None:
        """Test a body that does not shrink keeps flag NONE."""
        noise = Bytes(random.Random(0).randbytes(2000))
        data = encode(noise, ZLIB.replace(compression_threshold=0))

        assert read_header(data).compression is CompressionType.NONE
        assert decode(data) == noise

    def test_snappy_payload_is_raw_block(self, compressible_value) -> None:
        """Test the Snappy payload is a plain block."""
        data = encode(compressible_value, SNAPPY)
        header = read_header(data)

        body = snappy.decompress(data[header.body_offset:])
        assert len(body) == header.uncompressed_length

    def test_zlib_payload_is_raw_deflate(self, compressible_value) -> None:
        """Test the zlib payload is a raw deflate stream."""
        data = encode(compressible_value, ZLIB)
        header = read_header(data)

        body = zlib.decompress(data[header.body_offset:], -15)
        assert len(body) == header.uncompressed_length

    def test_compress_body_none(self) -> None:
        """Test NONE returns the body untouched."""
        assert compress_body(b"abc", EncoderConfig()) == (CompressionType.NONE, b"abc")


class TestDecompressionErrors:
    """Test malformed compressed documents."""

    def test_length_mismatch(self) -> None:
        """Test a header length that disagrees with the payload."""
        body = b"\x05" * 2000
        payload = zlib.compressobj(6, zlib.DEFLATED, -15)
        compressed = payload.compress(body) + payload.flush()

        with pytest.raises(FramingError, match="Length mismatch"):
            decompress_body(CompressionType.ZLIB, compressed, 1999, DecoderConfig())
        with pytest.raises(FramingError, match="Length mismatch"):
            decompress_body(CompressionType.ZLIB, compressed, 2001, DecoderConfig())

    def test_snappy_length_mismatch(self) -> None:
        """Test a Snappy block declaring another length."""
        compressed = snappy.compress(b"\x05" * 2000)
        with pytest.raises(FramingError, match="Length mismatch"):
            decompress_body(CompressionType.SNAPPY, compressed, 1000, DecoderConfig())

    def test_corrupt_deflate(self) -> None:
        """Test garbage in place of a deflate stream."""
        with pytest.raises(FramingError):
            decompress_body(CompressionType.ZLIB, b"\xff\xff\xff\xff", 10, DecoderConfig())

    def test_truncated_deflate(self, compressible_value) -> None:
        """Test a document cut off inside the compressed payload."""
        data = encode(compressible_value, ZLIB)
        with pytest.raises(FramingError):
            decode(data[:-10])

    def test_corrupt_snappy(self, compressible_value) -> None:
        """Test a document cut off inside the Snappy block."""
        data = encode(compressible_value, SNAPPY)
        with pytest.raises(FramingError):
            decode(data[: len(data) // 2])

    def test_garbage_snappy_block(self) -> None:
        """Test a block whose length prefix is right but whose elements are not."""
        with pytest.raises(FramingError, match="Corrupted Snappy payload"):
            decompress_body(CompressionType.SNAPPY, b"\x0a\xff\xff\xff", 10, DecoderConfig())

    def test_refuse_snappy(self, compressible_value) -> None:
        """Test Snappy documents can be refused."""
        data = encode(compressible_value, SNAPPY)
        with pytest.raises(FramingError, match="refused"):
            decode(data, DecoderConfig(refuse_snappy=True))
        assert decode(data, DecoderConfig(refuse_zlib=True)) == compressible_value

    def test_refuse_zlib(self, compressible_value) -> None:
        """Test zlib documents can be refused."""
        data = encode(compressible_value, ZLIB)
        with pytest.raises(FramingError, match="refused"):
            decode(data, DecoderConfig(refuse_zlib=True))

    def test_max_uncompressed_size(self, compressible_value) -> None:
        """Test the declared size is checked before decompressing."""
        data = encode(compressible_value, ZLIB)
        size = read_header(data).uncompressed_length

        with pytest.raises(FramingError, match="max_uncompressed_size"):
            decode(data, DecoderConfig(max_uncompressed_size=size - 1))
        assert decode(data, DecoderConfig(max_uncompressed_size=size)) == compressible_value
