"""Command-line tools for srlcodec."""
