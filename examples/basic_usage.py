#!/usr/bin/env python3
"""Basic usage example for srlcodec.

This example demonstrates:
1. Building a value graph
2. Encoding it into a tagged binary document
3. Decoding it back
4. Comparing protocol versions and compression
"""

from __future__ import annotations

import json

from srlcodec import (
    TRUE,
    CompressionType,
    EncoderConfig,
    Float,
    Integer,
    Mapping,
    Sequence,
    String,
    body_size,
    decode,
    encode,
    encoded_size,
)


def build_report() -> Mapping:
    """Vehicle status report with a list of readings."""
    return Mapping(
        [
            (String("vehicle_id"), Integer(42)),
            (String("depth_cm"), Integer(2500)),
            (String("heading"), Float(271.5)),
            (String("active"), TRUE),
            (String("readings"), Sequence([Integer(n * 7) for n in range(40)])),
        ]
    )


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("srlcodec Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Building a status report...")
    report = build_report()
    for key, value in report.pairs[:4]:
        print(f"   {key.value}: {value.value}")
    print()

    print("2. Encoding to a tagged binary document...")
    encoded_data = encode(report)
    print(f"   Encoded size: {len(encoded_data)} bytes")
    print(f"   Header: {encoded_data[:3].hex()}")
    print(f"   First body bytes: {encoded_data[3:19].hex()}")
    print()

    print("3. Decoding from binary...")
    decoded = decode(encoded_data)
    print(f"   Vehicle ID: {decoded.get(String('vehicle_id')).value}")
    print(f"   Readings: {len(decoded.get(String('readings')).items)}")
    print()

    print("4. Verifying round-trip...")
    if decoded == report:
        print("   ✓ Round-trip successful! Values match.")
    else:
        print("   ✗ Round-trip failed! Values don't match.")
    print()

    print("5. Comparing protocol versions...")
    for version in (0, 1, 2, 3):
        size = body_size(report, EncoderConfig(protocol_version=version))
        print(f"   protocol {version}: {size} byte body")
    print()

    print("6. Comparing compression...")
    for compression in CompressionType:
        config = EncoderConfig(compression_type=compression, compression_threshold=0)
        print(f"   {compression.name}: {encoded_size(report, config)} bytes")
    print()

    print("7. Comparing to JSON encoding...")
    json_bytes = json.dumps(
        {
            "vehicle_id": 42,
            "depth_cm": 2500,
            "heading": 271.5,
            "active": True,
            "readings": [n * 7 for n in range(40)],
        }
    ).encode("utf-8")
    print(f"   srlcodec size: {len(encoded_data)} bytes")
    print(f"   JSON size: {len(json_bytes)} bytes")
    print(f"   Ratio: {len(json_bytes) / len(encoded_data):.1f}x")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
