"""Tests for CLI tool."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from srlcodec import (
    CompressionType,
    EncoderConfig,
    Integer,
    Mapping,
    Sequence,
    String,
    encode,
)
from srlcodec.cli.inspect import render_value
from srlcodec.cli.main import main


def run_cli(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "srlcodec.cli.main", *args],
        capture_output=True,
        text=True,
    )


def test_cli_help() -> None:
    """Test CLI --help flag."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert "srlcodec: Tagged Binary Codec" in result.stdout
    assert "--inspect" in result.stdout


def test_cli_version() -> None:
    """Test CLI --version flag."""
    result = run_cli("--version")
    assert result.returncode == 0
    assert "srlcodec 0.1.0" in result.stdout


def test_cli_inspect_file(tmp_path: Path) -> None:
    """Test CLI --inspect with an encoded document."""
    shared = Sequence([Integer(1)])
    value = Mapping([(String("first"), shared), (String("second"), shared)])
    document = tmp_path / "shared.srl"
    document.write_bytes(encode(value, EncoderConfig(track_references=True)))

    result = run_cli("--inspect", str(document))
    assert result.returncode == 0
    assert "srlcodec: Tagged Binary Codec" in result.stdout
    assert "protocol version" in result.stdout
    assert "Mapping[2]" in result.stdout
    assert "String 'second'" in result.stdout
    assert "-> #2" in result.stdout


def test_cli_inspect_compressed(tmp_path: Path) -> None:
    """Test CLI --inspect reports compression."""
    value = Sequence([String("telemetry") for _ in range(200)])
    document = tmp_path / "compressed.srl"
    document.write_bytes(encode(value, EncoderConfig(compression_type=CompressionType.ZLIB)))

    result = run_cli("--inspect", str(document))
    assert result.returncode == 0
    assert "ZLIB" in result.stdout
    assert "compressed" in result.stdout


def test_cli_inspect_missing_file() -> None:
    """Test CLI --inspect with missing file."""
    result = run_cli("--inspect", "nonexistent.srl")
    assert result.returncode == 1
    assert "Error" in result.stderr or "not found" in result.stderr.lower()


def test_cli_inspect_corrupt_file(tmp_path: Path) -> None:
    """Test CLI --inspect with a file that is not a document."""
    document = tmp_path / "corrupt.srl"
    document.write_bytes(b"not a document")

    result = run_cli("--inspect", str(document))
    assert result.returncode == 1
    assert "Error inspecting file" in result.stderr


def test_cli_inspect_directory(tmp_path: Path, capsys) -> None:
    """Test CLI --inspect with a path that cannot be read as a file."""
    assert main(["--inspect", str(tmp_path)]) == 1
    assert "Error inspecting file" in capsys.readouterr().err


def test_cli_max_depth(tmp_path: Path, capsys) -> None:
    """Test --max-depth bounds nesting while decoding."""
    value = Sequence([Sequence([Sequence([Integer(1)])])])
    document = tmp_path / "nested.srl"
    document.write_bytes(encode(value))

    assert main(["--inspect", str(document), "--max-depth", "2"]) == 1
    assert "recursion depth" in capsys.readouterr().err
    assert main(["--inspect", str(document), "--max-depth", "3"]) == 0


def test_cli_no_args() -> None:
    """Test CLI with no arguments (should show help)."""
    result = run_cli()
    assert result.returncode == 0
    assert "srlcodec: Tagged Binary Codec" in result.stdout


def test_render_value() -> None:
    """Test value tree rendering."""
    loop = Sequence([Integer(1)])
    loop.items.append(loop)

    assert render_value(loop) == ["#1 Sequence[2]", "    Integer 1", "    -> #1"]
