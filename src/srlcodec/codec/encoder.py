"""Tagged binary encoder for srlcodec values.

This module provides the encode() function that walks a value graph depth-first
and emits a tagged body, then hands the body to the framing layer for the
header and optional compression.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import EncoderConfig
from ..exceptions import EncodeError, RecursionLimitError
from ..models.values import (
    COMPOUND_TYPES,
    Boolean,
    Bytes,
    Float,
    Integer,
    Mapping,
    Null,
    ObjectMarker,
    Reference,
    Sequence,
    String,
    Value,
)
from . import tags
from .tags import PROTOCOLS, ProtocolFeatures
from .tracker import EncodeTracker
from .varint import ByteWriter, varint_length

logger = logging.getLogger(__name__)


def encode(
    value: Value,
    config: Optional[EncoderConfig] = None,
    *,
    user_data: Optional[Value] = None,
) -> bytes:
    """Encode a value graph into a complete document.

    Compound values are written depth-first. With ``track_references`` each
    compound object is recorded at its start offset before its children are
    written, so a repeated or cyclic object becomes a back-reference to that
    offset instead of being written again.

    Args:
        value: Root of the value graph
        config: Encoder configuration (defaults to ``EncoderConfig()``)
        user_data: Optional value stored in the header's user-data section
            (protocol version 2 and later)

    Returns:
        Header followed by the (possibly compressed) body

    Raises:
        EncodeError: If the graph contains something that is not a Value, an
            integer outside the 64-bit range, or the body is too large
        RecursionLimitError: If the graph nests deeper than
            ``max_recursion_depth`` (e.g. a cycle without reference tracking)

    Examples:
        ```python
        from srlcodec import EncoderConfig, Integer, Sequence, encode

        # Protocol 3, no compression: 3 header bytes + 1 tag byte
        data = encode(Integer(5))
        assert data == b"=\\x03\\x00\\x05"

        # Cycles need reference tracking
        loop = Sequence()
        loop.items.append(loop)
        data = encode(loop, EncoderConfig(track_references=True))
        ```
    """
    if config is None:
        config = EncoderConfig()

    body = _BodyEncoder(config).run(value)

    user_body: Optional[bytes] = None
    if user_data is not None:
        if not PROTOCOLS[config.protocol_version].user_data:
            raise EncodeError(
                f"User data requires protocol version 2 or later, "
                f"got {config.protocol_version}"
            )
        user_body = _BodyEncoder(config).run(user_data)

    # Import here to avoid circular dependency
    from ..framing import frame_document

    document = frame_document(body, config, user_data=user_body)
    logger.debug(
        "Encoded %s: body %d bytes, document %d bytes",
        type(value).__name__,
        len(body),
        len(document),
    )
    return document


class Encoder:
    """Reusable encoder bound to one configuration.

    Each call gets fresh tracking state, so an Encoder may be shared between
    threads.

    Example:
        >>> encoder = Encoder(EncoderConfig(track_references=True))
        >>> data = encoder.encode(Sequence([Integer(1)]))
    """

    def __init__(self, config: Optional[EncoderConfig] = None) -> None:
        self.config = config if config is not None else EncoderConfig()

    def encode(self, value: Value, *, user_data: Optional[Value] = None) -> bytes:
        return encode(value, self.config, user_data=user_data)


class _BodyEncoder:
    """State of a single body encode: output buffer, tracker and depth."""

    def __init__(self, config: EncoderConfig) -> None:
        self._config = config
        self._features: ProtocolFeatures = PROTOCOLS[config.protocol_version]
        self._writer = ByteWriter()
        self._tracker = EncodeTracker()
        self._depth = 0

    def run(self, value: Value) -> bytes:
        try:
            self._write_value(value)
        except RecursionError as e:
            raise RecursionLimitError(
                f"Interpreter recursion limit reached at depth {self._depth} while encoding"
            ) from e
        return self._writer.to_bytes()

    def _write_value(self, value: Value, *, mapping_key: bool = False) -> None:
        if not isinstance(value, Value):
            raise EncodeError(f"Cannot encode {type(value).__name__}: not a Value")

        if isinstance(value, COMPOUND_TYPES):
            self._write_compound(value)
        else:
            self._write_scalar(value, mapping_key=mapping_key)

        max_size = self._config.max_body_size
        if max_size and len(self._writer) > max_size:
            raise EncodeError(
                f"Encoded body ({len(self._writer)} bytes) exceeds max_body_size={max_size}"
            )

    def _write_backref(self, tag: int, target: int, *, flag_target: bool = True) -> None:
        """Write a tag followed by an offset pointing back to ``target``."""
        referrer = self._writer.position
        self._writer.write_byte(tag)
        self._writer.write_varint(self._features.encode_offset(target, referrer))
        if flag_target:
            self._writer.set_bits(target, tags.TRACK_FLAG)

    # Scalars

    def _write_scalar(self, value: Value, *, mapping_key: bool) -> None:
        if isinstance(value, Null):
            self._writer.write_byte(tags.UNDEF)
            return
        if isinstance(value, Boolean):
            self._writer.write_byte(tags.TRUE if value.value else tags.FALSE)
            return

        offset = self._writer.position
        if self._config.track_aliases:
            earlier = self._tracker.record_if_seen(value, offset)
            if earlier is not None:
                self._write_backref(tags.ALIAS, earlier)
                return

        if isinstance(value, Integer):
            self._write_integer(value.value)
        elif isinstance(value, Float):
            if not isinstance(value.value, (int, float)) or isinstance(value.value, bool):
                raise EncodeError(f"Float holds {type(value.value).__name__}, expected float")
            self._writer.write_byte(tags.DOUBLE)
            self._writer.write_double(float(value.value))
        elif isinstance(value, Bytes):
            if not isinstance(value.value, (bytes, bytearray, memoryview)):
                raise EncodeError(f"Bytes holds {type(value.value).__name__}, expected bytes")
            self._write_binary(bytes(value.value))
        elif isinstance(value, String):
            self._write_string(value.value, copyable=mapping_key)
        else:
            raise EncodeError(f"Cannot encode {type(value).__name__}: unknown value type")

    def _write_integer(self, number: int) -> None:
        if not isinstance(number, int) or isinstance(number, bool):
            raise EncodeError(f"Integer holds {type(number).__name__}, expected int")
        if not tags.MIN_INTEGER <= number <= tags.MAX_INTEGER:
            raise EncodeError(
                f"Integer {number} out of bounds [{tags.MIN_INTEGER}, {tags.MAX_INTEGER}]"
            )

        if 0 <= number <= tags.MAX_INLINE_POS:
            self._writer.write_byte(tags.POS_LOW | number)
        elif tags.MIN_INLINE_NEG <= number < 0:
            self._writer.write_byte(number + 32)
        elif number > 0:
            self._writer.write_byte(tags.VARINT)
            self._writer.write_varint(number)
        else:
            self._writer.write_byte(tags.ZIGZAG)
            self._writer.write_zigzag(number)

    def _write_binary(self, data: bytes) -> None:
        if len(data) <= tags.MAX_SHORT_BINARY:
            self._writer.write_byte(tags.SHORT_BINARY_LOW | len(data))
        else:
            self._writer.write_byte(tags.BINARY)
            self._writer.write_varint(len(data))
        self._writer.write_bytes(data)

    def _write_string(self, text: str, *, copyable: bool = False) -> None:
        if not isinstance(text, str):
            raise EncodeError(f"String holds {type(text).__name__}, expected str")
        try:
            encoded = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodeError(f"String is not encodable as UTF-8: {e}") from e

        offset = self._writer.position
        if copyable and self._features.copy_tags:
            earlier = self._tracker.string_offset(text, offset)
            if earlier is not None:
                copy_size = 1 + varint_length(self._features.encode_offset(earlier, offset))
                if copy_size < 1 + varint_length(len(encoded)) + len(encoded):
                    self._write_backref(tags.COPY, earlier, flag_target=False)
                    return

        self._writer.write_byte(tags.STR_UTF8)
        self._writer.write_varint(len(encoded))
        self._writer.write_bytes(encoded)

    # Compound values

    def _write_compound(self, value: Value) -> None:
        offset = self._writer.position
        if self._config.track_references:
            earlier = self._tracker.record_if_seen(value, offset)
            if earlier is not None:
                self._write_backref(tags.REFP, earlier)
                return

        self._depth += 1
        try:
            if self._depth > self._config.max_recursion_depth:
                raise RecursionLimitError(
                    f"Hit maximum recursion depth ({self._config.max_recursion_depth}) "
                    f"while encoding {type(value).__name__}, aborting serialization"
                )

            if isinstance(value, Sequence):
                self._write_sequence(value)
            elif isinstance(value, Mapping):
                self._write_mapping(value)
            elif isinstance(value, Reference):
                self._write_reference(value)
            elif isinstance(value, ObjectMarker):
                self._write_object(value, offset)
        finally:
            self._depth -= 1

    def _write_count(self, count: int, inline_low: int, long_tag: int) -> None:
        if self._features.inline_containers and count <= tags.MAX_INLINE_COUNT:
            self._writer.write_byte(inline_low + count)
        else:
            self._writer.write_byte(long_tag)
            self._writer.write_varint(count)

    def _write_sequence(self, value: Sequence) -> None:
        self._write_count(len(value.items), tags.ARRAY_LOW, tags.ARRAY)
        for item in value.items:
            self._write_value(item)

    def _write_mapping(self, value: Mapping) -> None:
        self._write_count(len(value.pairs), tags.HASH_LOW, tags.HASH)
        for pair in value.pairs:
            try:
                key, item = pair
            except (TypeError, ValueError) as e:
                raise EncodeError(f"Mapping pair must be a (key, value) tuple, got {pair!r}") from e
            self._write_value(key, mapping_key=True)
            self._write_value(item)

    def _write_reference(self, value: Reference) -> None:
        if value.target is None:
            raise EncodeError("Cannot encode a Reference without a target")
        if value.weak and self._config.track_aliases:
            self._writer.write_byte(tags.WEAKEN)
        else:
            self._writer.write_byte(tags.REFN)
        self._write_value(value.target)

    def _write_object(self, value: ObjectMarker, offset: int) -> None:
        if not isinstance(value.class_name, str) or not value.class_name:
            raise EncodeError(f"ObjectMarker needs a non-empty class name, got {value.class_name!r}")
        if value.payload is None:
            raise EncodeError(f"ObjectMarker {value.class_name!r} has no payload")

        earlier = None
        if self._features.copy_tags:
            # The class name string starts right after the OBJECT tag
            earlier = self._tracker.class_name_offset(value.class_name, offset + 1)

        if earlier is not None:
            self._write_backref(tags.OBJECTV, earlier, flag_target=False)
        else:
            self._writer.write_byte(tags.OBJECT)
            self._write_string(value.class_name)
        self._write_value(value.payload)
