"""Tagged binary decoder for srlcodec documents.

This module provides the decode() function that parses the header, hands the
(decompressed) body to a single forward pass over its tags, and rebuilds the
value graph, resolving back-references through an offset table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from ..config import DecoderConfig
from ..exceptions import FormatError, RecursionLimitError
from ..models.values import (
    FALSE,
    NULL,
    TRUE,
    Bytes,
    Float,
    Integer,
    Mapping,
    ObjectMarker,
    Reference,
    ReferenceKind,
    Sequence,
    String,
    Value,
)
from . import tags
from .tags import ProtocolFeatures, features_for, tag_name
from .tracker import DecodeTable
from .varint import ByteReader

if TYPE_CHECKING:
    from ..framing.header import Header

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    """A decoded document.

    Attributes:
        header: Parsed header
        body: Root value of the body
        user_data: Value stored in the header's user-data section, if any
    """

    header: "Header"
    body: Value
    user_data: Optional[Value] = None


def decode(data: bytes, config: Optional[DecoderConfig] = None) -> Value:
    """Decode a document and return the root value of its body.

    Args:
        data: Complete document (header + body)
        config: Decoder configuration (defaults to ``DecoderConfig()``)

    Returns:
        Root value. Back-references decode to the very same Python object,
        so shared and cyclic structure is preserved.

    Raises:
        FormatError: If the document is malformed in any way, including
            DanglingReferenceError for back-references to nothing
        RecursionLimitError: If the body nests deeper than
            ``max_recursion_depth``

    Examples:
        ```python
        from srlcodec import Integer, decode, encode

        assert decode(b"=\\x03\\x00\\x05") == Integer(5)
        ```
    """
    return decode_document(data, config).body


def decode_document(data: bytes, config: Optional[DecoderConfig] = None) -> Document:
    """Decode a document, returning header, body and user data.

    Raises:
        FormatError: If the document is malformed
        RecursionLimitError: If the body nests too deeply
    """
    if config is None:
        config = DecoderConfig()

    # Import here to avoid circular dependency
    from ..framing import unframe_document

    header, body = unframe_document(data, config)
    features = features_for(header.version)

    root = _BodyDecoder(body, features, config).run()
    user_data: Optional[Value] = None
    if header.user_data is not None:
        user_data = _BodyDecoder(header.user_data, features, config).run()

    logger.debug("Decoded %s from %d-byte document", type(root).__name__, len(data))
    return Document(header=header, body=root, user_data=user_data)


class Decoder:
    """Reusable decoder bound to one configuration.

    Example:
        >>> decoder = Decoder(DecoderConfig(max_recursion_depth=64))
        >>> decoder.decode(b"=\\x03\\x00\\x05")
        Integer(value=5)
    """

    def __init__(self, config: Optional[DecoderConfig] = None) -> None:
        self.config = config if config is not None else DecoderConfig()

    def decode(self, data: bytes) -> Value:
        return decode(data, self.config)

    def decode_document(self, data: bytes) -> Document:
        return decode_document(data, self.config)


class _BodyDecoder:
    """State of a single body decode: reader, offset table and depth."""

    def __init__(self, body: bytes, features: ProtocolFeatures, config: DecoderConfig) -> None:
        self._reader = ByteReader(body)
        self._features = features
        self._config = config
        self._table = DecodeTable()
        self._depth = 0
        self._handlers: dict[int, Callable[[int, int], Value]] = {
            tags.VARINT: self._read_varint,
            tags.ZIGZAG: self._read_zigzag,
            tags.FLOAT: self._read_float,
            tags.DOUBLE: self._read_double,
            tags.UNDEF: lambda offset, tag: NULL,
            tags.TRUE: lambda offset, tag: TRUE,
            tags.FALSE: lambda offset, tag: FALSE,
            tags.BINARY: self._read_binary,
            tags.STR_UTF8: self._read_string,
            tags.COPY: self._read_copy,
            tags.REFN: self._read_reference,
            tags.WEAKEN: self._read_reference,
            tags.ARRAY: self._read_array,
            tags.HASH: self._read_hash,
            tags.OBJECT: self._read_object,
            tags.OBJECTV: self._read_object,
        }

    def run(self) -> Value:
        if self._reader.at_end():
            raise FormatError("Empty body: expected a value")
        try:
            root = self._read_value()
        except RecursionError as e:
            raise RecursionLimitError(
                f"Interpreter recursion limit reached at depth {self._depth} while decoding"
            ) from e
        if not self._reader.at_end():
            raise FormatError(
                f"Trailing data: {self._reader.remaining()} bytes after the root value"
            )
        return root

    def _read_value(self) -> Value:
        offset = self._reader.position
        tag = self._reader.read_byte() & tags.TYPE_MASK
        while tag == tags.PAD:
            offset = self._reader.position
            tag = self._reader.read_byte() & tags.TYPE_MASK

        if not self._features.allows(tag):
            raise FormatError(
                f"Tag {tag_name(tag)} at offset {offset} is not valid in "
                f"protocol version {self._features.version}"
            )

        # Back-references return the materialized object itself
        if tag in (tags.REFP, tags.ALIAS):
            return self._table.resolve(self._read_offset(offset), offset)

        if tag <= tags.POS_HIGH:
            value: Value = Integer(tag)
        elif tag <= tags.NEG_HIGH:
            value = Integer(tag - 32)
        elif tags.ARRAY_LOW <= tag <= tags.ARRAY_HIGH:
            return self._read_items(offset, tag - tags.ARRAY_LOW)
        elif tags.HASH_LOW <= tag <= tags.HASH_HIGH:
            return self._read_pairs(offset, tag - tags.HASH_LOW)
        elif tags.SHORT_BINARY_LOW <= tag <= tags.SHORT_BINARY_HIGH:
            value = Bytes(self._reader.read_bytes(tag - tags.SHORT_BINARY_LOW))
        else:
            handler = self._handlers.get(tag)
            if handler is None:
                raise FormatError(f"Unknown tag {tag_name(tag)} (0x{tag:02X}) at offset {offset}")
            # Compound handlers register themselves before reading children
            return self._record(offset, handler(offset, tag))

        return self._record(offset, value)

    def _record(self, offset: int, value: Value) -> Value:
        if offset not in self._table:
            self._table.record(offset, value)
        return value

    def _read_offset(self, referrer: int) -> int:
        return self._features.decode_offset(self._reader.read_varint(), referrer)

    def _enter(self, offset: int) -> None:
        self._depth += 1
        if self._depth > self._config.max_recursion_depth:
            raise RecursionLimitError(
                f"Hit maximum recursion depth ({self._config.max_recursion_depth}) "
                f"at offset {offset}, aborting deserialization"
            )

    def _check_length(self, length: int, offset: int) -> None:
        limit = self._config.max_string_length
        if limit and length > limit:
            raise FormatError(
                f"String at offset {offset} is {length} bytes, exceeds max_string_length={limit}"
            )

    # Scalars

    def _read_varint(self, offset: int, tag: int) -> Value:
        return Integer(self._reader.read_varint())

    def _read_zigzag(self, offset: int, tag: int) -> Value:
        return Integer(self._reader.read_zigzag())

    def _read_float(self, offset: int, tag: int) -> Value:
        return Float(self._reader.read_float())

    def _read_double(self, offset: int, tag: int) -> Value:
        return Float(self._reader.read_double())

    def _read_binary(self, offset: int, tag: int) -> Value:
        length = self._reader.read_varint()
        self._check_length(length, offset)
        return Bytes(self._reader.read_bytes(length))

    def _read_string(self, offset: int, tag: int) -> Value:
        length = self._reader.read_varint()
        self._check_length(length, offset)
        raw = self._reader.read_bytes(length)
        try:
            return String(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise FormatError(f"String at offset {offset}: invalid UTF-8 encoding: {e}") from e

    def _read_copy(self, offset: int, tag: int) -> Value:
        target = self._table.resolve(self._read_offset(offset), offset)
        if isinstance(target, String):
            return String(target.value)
        if isinstance(target, Bytes):
            return Bytes(target.value)
        raise FormatError(
            f"COPY at offset {offset} points to a {type(target).__name__}, expected a string"
        )

    # Compound values

    def _read_reference(self, offset: int, tag: int) -> Value:
        kind = ReferenceKind.WEAK if tag == tags.WEAKEN else ReferenceKind.STRONG
        reference = Reference(kind=kind)
        self._table.record(offset, reference)
        self._enter(offset)
        try:
            reference.target = self._read_value()
        finally:
            self._depth -= 1
        return reference

    def _read_array(self, offset: int, tag: int) -> Value:
        return self._read_items(offset, self._reader.read_varint())

    def _read_hash(self, offset: int, tag: int) -> Value:
        return self._read_pairs(offset, self._reader.read_varint())

    def _read_items(self, offset: int, count: int) -> Sequence:
        limit = self._config.max_num_array_entries
        if limit and count > limit:
            raise FormatError(
                f"Sequence at offset {offset} has {count} entries, "
                f"exceeds max_num_array_entries={limit}"
            )
        # Every item takes at least one byte
        if count > self._reader.remaining():
            raise FormatError(
                f"Truncated data: sequence at offset {offset} declares {count} items, "
                f"only {self._reader.remaining()} bytes remain"
            )

        sequence = Sequence()
        self._table.record(offset, sequence)
        self._enter(offset)
        try:
            for _ in range(count):
                sequence.items.append(self._read_value())
        finally:
            self._depth -= 1
        return sequence

    def _read_pairs(self, offset: int, count: int) -> Mapping:
        limit = self._config.max_num_hash_entries
        if limit and count > limit:
            raise FormatError(
                f"Mapping at offset {offset} has {count} entries, "
                f"exceeds max_num_hash_entries={limit}"
            )
        if 2 * count > self._reader.remaining():
            raise FormatError(
                f"Truncated data: mapping at offset {offset} declares {count} pairs, "
                f"only {self._reader.remaining()} bytes remain"
            )

        mapping = Mapping()
        self._table.record(offset, mapping)
        self._enter(offset)
        try:
            for _ in range(count):
                key = self._read_value()
                mapping.pairs.append((key, self._read_value()))
        finally:
            self._depth -= 1
        return mapping

    def _read_object(self, offset: int, tag: int) -> Value:
        if self._config.refuse_objects:
            raise FormatError(f"Object marker at offset {offset} refused by decoder configuration")

        marker = ObjectMarker()
        self._table.record(offset, marker)
        self._enter(offset)
        try:
            if tag == tags.OBJECTV:
                name = self._table.resolve(self._read_offset(offset), offset)
            else:
                name = self._read_value()
            marker.class_name = self._class_name(name, offset)
            marker.payload = self._read_value()
        finally:
            self._depth -= 1
        return marker

    @staticmethod
    def _class_name(name: Value, offset: int) -> str:
        if isinstance(name, String):
            return name.value
        if isinstance(name, Bytes):
            try:
                return name.value.decode("utf-8")
            except UnicodeDecodeError as e:
                raise FormatError(f"Class name at offset {offset}: invalid UTF-8: {e}") from e
        raise FormatError(
            f"Object at offset {offset} has a {type(name).__name__} class name, expected a string"
        )
