"""Test helpers for building repository trees on disk."""

from __future__ import annotations

from pathlib import Path

# Smallest valid PNG header; not decodable as UTF-8
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"


def write_files(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create files (text or bytes) below `root`, making parent directories."""
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root
