"""Utility functions for srlcodec.

This module provides size calculation helpers.
"""

from __future__ import annotations

from .sizing import body_size, encoded_size, varint_length

__all__ = [
    "encoded_size",
    "body_size",
    "varint_length",
]
