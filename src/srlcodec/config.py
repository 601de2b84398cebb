"""Encoder and decoder configuration.

Both configurations are immutable pydantic models. Every option is validated
when the object is built, and any violation surfaces as ConfigurationError
so that a bad option can never reach an encode or decode call.

Examples:
    ```python
    from srlcodec import CompressionType, EncoderConfig

    # Protocol 3 with reference tracking and zlib above 512 bytes
    config = EncoderConfig(
        track_references=True,
        compression_type=CompressionType.ZLIB,
        compression_threshold=512,
        compression_level=9,
    )

    # Derive a variant without touching the original
    legacy = config.replace(protocol_version=1)
    ```
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

MIN_PROTOCOL_VERSION = 0
MAX_PROTOCOL_VERSION = 3
DEFAULT_PROTOCOL_VERSION = 3
DEFAULT_MAX_RECURSION_DEPTH = 256


class CompressionType(enum.IntEnum):
    """Body compression scheme, as stored in the low bits of the header flags."""

    NONE = 0
    SNAPPY = 1
    ZLIB = 2

    # Generic names for the two algorithm classes
    FAST = 1
    GENERAL = 2


class _Options(BaseModel):
    """Shared behavior of the option models."""

    model_config = ConfigDict(
        # Options are values: build a new one instead of mutating
        frozen=True,
        # Misspelled options must not pass silently
        extra="forbid",
        validate_default=True,
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {type(self).__name__}: {e}") from e

    def replace(self, **changes: Any) -> Any:
        """Return a validated copy with some options changed.

        Raises:
            ConfigurationError: If the resulting options are invalid
        """
        return type(self)(**{**self.model_dump(), **changes})


class EncoderConfig(_Options):
    """Options controlling how a value graph is turned into bytes.

    Attributes:
        protocol_version: Wire protocol version (0-3)
        track_references: Encode repeated compound objects once and refer back
            to them (required for cycles)
        track_aliases: Keep weak references and repeated scalar instances as
            distinct tags instead of collapsing them to plain copies
        compression_type: Requested body compression
        compression_threshold: Bodies shorter than this are never compressed
        compression_level: zlib level (1-9), ignored by Snappy
        max_recursion_depth: Deepest nesting the encoder will follow
        max_body_size: Largest body the encoder will produce (0 = unlimited)
    """

    protocol_version: int = Field(
        default=DEFAULT_PROTOCOL_VERSION, ge=MIN_PROTOCOL_VERSION, le=MAX_PROTOCOL_VERSION
    )
    track_references: bool = False
    track_aliases: bool = False
    compression_type: CompressionType = CompressionType.NONE
    compression_threshold: int = Field(default=1024, ge=0)
    compression_level: int = Field(default=6, ge=1, le=9)
    max_recursion_depth: int = Field(default=DEFAULT_MAX_RECURSION_DEPTH, ge=1)
    max_body_size: int = Field(default=0, ge=0)


class DecoderConfig(_Options):
    """Options bounding what the decoder accepts from untrusted input.

    A limit of 0 means unlimited.

    Attributes:
        max_recursion_depth: Deepest nesting the decoder will follow
        max_num_array_entries: Largest accepted sequence
        max_num_hash_entries: Largest accepted mapping (in pairs)
        max_string_length: Longest accepted string or byte string
        max_uncompressed_size: Largest accepted decompressed body
        refuse_snappy: Reject Snappy-compressed documents
        refuse_zlib: Reject zlib-compressed documents
        refuse_objects: Reject object markers
    """

    max_recursion_depth: int = Field(default=DEFAULT_MAX_RECURSION_DEPTH, ge=1)
    max_num_array_entries: int = Field(default=0, ge=0)
    max_num_hash_entries: int = Field(default=0, ge=0)
    max_string_length: int = Field(default=0, ge=0)
    max_uncompressed_size: int = Field(default=0, ge=0)
    refuse_snappy: bool = False
    refuse_zlib: bool = False
    refuse_objects: bool = False
