#!/usr/bin/env python3
"""Shared and cyclic structure example for srlcodec.

This example demonstrates:
1. Encoding a graph where one object is reachable from several places
2. Encoding a cycle with reference tracking
3. Weak back-pointers
4. Attaching user data to a document
"""

from __future__ import annotations

from srlcodec import (
    EncoderConfig,
    Integer,
    Mapping,
    RecursionLimitError,
    Sequence,
    String,
    decode,
    decode_document,
    encode,
    weak,
)
from srlcodec.cli.inspect import render_value


def main() -> None:
    """Run the shared references example."""
    print("=" * 60)
    print("srlcodec Shared References Example")
    print("=" * 60)
    print()

    print("1. Sharing one object between two owners...")
    waypoint = Mapping([(String("lat"), Integer(4512)), (String("lon"), Integer(-6321))])
    plan = Sequence([waypoint, waypoint, waypoint])

    plain = encode(plan)
    tracked = encode(plan, EncoderConfig(track_references=True))
    print(f"   Without tracking: {len(plain)} bytes")
    print(f"   With tracking:    {len(tracked)} bytes")
    decoded = decode(tracked)
    print(f"   Same object after decode: {decoded.items[0] is decoded.items[2]}")
    print()

    print("2. Encoding a cycle...")
    loop = Sequence([Integer(1)])
    loop.items.append(loop)
    try:
        encode(loop, EncoderConfig(max_recursion_depth=32))
    except RecursionLimitError as e:
        print(f"   Without tracking: {e}")
    decoded = decode(encode(loop, EncoderConfig(track_references=True)))
    print(f"   With tracking: decoded.items[1] is decoded -> {decoded.items[1] is decoded}")
    print()

    print("3. Weak back-pointers...")
    parent = Mapping()
    child = Mapping([(String("parent"), weak(parent))])
    parent.pairs.append((String("child"), child))
    config = EncoderConfig(track_references=True, track_aliases=True)
    decoded = decode(encode(parent, config))
    for line in render_value(decoded):
        print(f"   {line}")
    print()

    print("4. Attaching user data...")
    data = encode(plan, config, user_data=Mapping([(String("mission"), String("survey-12"))]))
    document = decode_document(data)
    print(f"   User data: {document.user_data.get(String('mission')).value}")
    print(f"   Body entries: {len(document.body.items)}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
