"""Document inspection CLI command."""

from __future__ import annotations

from pathlib import Path

from ..codec.decoder import Document, decode_document
from ..config import DecoderConfig
from ..models.values import (
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


def inspect_file(file_path: Path, config: DecoderConfig | None = None) -> None:
    """Decode a document file and print its header and value tree.

    Args:
        file_path: Path to a file holding one encoded document
        config: Decoder configuration
    """
    data = file_path.read_bytes()
    document = decode_document(data, config)
    print_document(document, len(data))


def print_document(document: Document, document_size: int) -> None:
    """Print a decoded document.

    Args:
        document: Decoded document
        document_size: Size of the encoded document in bytes
    """
    header = document.header

    print("|" * 7, "srlcodec: Tagged Binary Codec", "|" * 7)
    print(f"{'-' * 27} Header {'-' * 27}")
    print(f"protocol version{'.' * 38}{header.version}")
    print(f"compression{'.' * 43}{header.compression.name}")
    print(f"user data{'.' * 45}{'yes' if header.has_user_data else 'no'}")
    print(f"document size{'.' * 41}{document_size} bytes")
    if header.uncompressed_length is not None:
        compressed = document_size - header.body_offset
        print(f"body size{'.' * 45}{header.uncompressed_length} bytes ({compressed} compressed)")
    else:
        print(f"body size{'.' * 45}{document_size - header.body_offset} bytes")
    print()

    if document.user_data is not None:
        print(f"{'-' * 25} User data {'-' * 26}")
        for line in render_value(document.user_data):
            print(line)
        print()

    print(f"{'-' * 28} Body {'-' * 28}")
    for line in render_value(document.body):
        print(line)
    print()


def render_value(value: Value) -> list[str]:
    """Render a value graph as indented lines.

    Compound objects are numbered the first time they are shown; later
    occurrences (shared or cyclic) print as ``-> #n``.

    Example:
        >>> render_value(Sequence([Integer(1), String("a")]))
        ['#1 Sequence[2]', '    Integer 1', "    String 'a'"]
    """
    lines: list[str] = []
    _render(value, 0, lines, {})
    return lines


def _render(value: Value, level: int, lines: list[str], shown: dict[int, int]) -> None:
    indent = "    " * level

    if isinstance(value, (Sequence, Mapping, Reference, ObjectMarker)):
        number = shown.get(id(value))
        if number is not None:
            lines.append(f"{indent}-> #{number}")
            return
        number = shown[id(value)] = len(shown) + 1

        if isinstance(value, Sequence):
            lines.append(f"{indent}#{number} Sequence[{len(value.items)}]")
            for item in value.items:
                _render(item, level + 1, lines, shown)
        elif isinstance(value, Mapping):
            lines.append(f"{indent}#{number} Mapping[{len(value.pairs)}]")
            for key, item in value.pairs:
                _render(key, level + 1, lines, shown)
                _render(item, level + 2, lines, shown)
        elif isinstance(value, Reference):
            lines.append(f"{indent}#{number} Reference ({value.kind.value})")
            if value.target is not None:
                _render(value.target, level + 1, lines, shown)
        else:
            lines.append(f"{indent}#{number} Object {value.class_name}")
            if value.payload is not None:
                _render(value.payload, level + 1, lines, shown)
        return

    if isinstance(value, Null):
        lines.append(f"{indent}Null")
    elif isinstance(value, (Boolean, Integer, Float)):
        lines.append(f"{indent}{type(value).__name__} {value.value}")
    elif isinstance(value, (Bytes, String)):
        lines.append(f"{indent}{type(value).__name__} {value.value!r}")
    else:
        lines.append(f"{indent}{type(value).__name__}")
