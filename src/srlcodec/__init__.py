"""srlcodec: Tagged Binary Codec

A Python library for a compact, self-describing, tagged binary format in the
style of Sereal. It encodes arbitrary nested value graphs, including graphs
with shared or circular references, and can compress the encoded body.

Key Features:
- Closed value model (scalars, sequences, mappings, references, objects)
- Varint encoding with small values inlined in the tag byte
- Identity-based reference tracking for shared and cyclic structure
- Snappy or zlib body compression above a size threshold
- Protocol versions 0-3
- Bounded decoding of untrusted input

Quick Start:
    >>> from srlcodec import EncoderConfig, Integer, Sequence, String, decode, encode
    >>>
    >>> shared = Sequence([String("depth"), Integer(1500)])
    >>> root = Sequence([shared, shared])
    >>>
    >>> data = encode(root, EncoderConfig(track_references=True))
    >>> decoded = decode(data)
    >>> decoded.items[0] is decoded.items[1]
    True
"""

from __future__ import annotations

from .codec import Decoder, Document, Encoder, decode, decode_document, encode
from .config import CompressionType, DecoderConfig, EncoderConfig
from .exceptions import (
    ConfigurationError,
    DanglingReferenceError,
    EncodeError,
    FormatError,
    FramingError,
    RecursionLimitError,
    SrlError,
)
from .framing import Header, read_header
from .models import (
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
from .utils import body_size, encoded_size, varint_length

__version__ = "0.1.0"

__all__ = [
    # Core API
    "encode",
    "decode",
    "decode_document",
    "Encoder",
    "Decoder",
    "Document",
    # Configuration
    "EncoderConfig",
    "DecoderConfig",
    "CompressionType",
    # Values
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
    # Exceptions
    "SrlError",
    "ConfigurationError",
    "FormatError",
    "EncodeError",
    "FramingError",
    "DanglingReferenceError",
    "RecursionLimitError",
    # Framing
    "Header",
    "read_header",
    # Sizing
    "encoded_size",
    "body_size",
    "varint_length",
    # Version
    "__version__",
]
