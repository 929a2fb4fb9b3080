"""Hex dump format shared with the memory reader.

The reader writes one record per line as hex, byte pairs optionally
separated by spaces:
    35 46 30 30 30 30 30 30 30 30 33 39 3A 48 65 6C 6C 6F
Blank lines and lines starting with '#' are ignored.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def parse_dump_line(line: str) -> bytes | None:
    """Return the record bytes of a dump line, None for blank/comment/garbage lines."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    try:
        return bytes.fromhex(stripped)
    except ValueError:
        logger.warning("Skipping malformed dump line: %.40s", stripped)
        return None


def format_dump_line(raw: bytes) -> str:
    """Encode a record as a dump line (space-separated upper-case byte pairs)."""
    return raw.hex(" ").upper()
