"""Tagged binary codec for srlcodec.

This module provides encoding and decoding of value graphs to and from the
tagged wire format, including shared and cyclic structure.
"""

from __future__ import annotations

from .decoder import Decoder, Document, decode, decode_document
from .encoder import Encoder, encode
from .tracker import DecodeTable, EncodeTracker

__all__ = [
    "encode",
    "decode",
    "decode_document",
    "Encoder",
    "Decoder",
    "Document",
    "EncodeTracker",
    "DecodeTable",
]
