from __future__ import annotations

"""Plain text and Markdown loader."""

from pathlib import Path


def load_text_file(path: Path) -> str:
    """Read a UTF-8 text file, dropping undecodable bytes."""
    return path.read_bytes().decode("utf-8", errors="ignore")
