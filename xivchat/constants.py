"""Byte-level constants of the in-memory chat log record format."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RecordLayout:
    """Fixed-width header layout of a raw chat log record."""

    timestamp_size: int = 8
    code_size: int = 4
    separator: int = 0x3A  # ':'

    @property
    def header_size(self) -> int:
        return self.timestamp_size + self.code_size


DEFAULT_LAYOUT = RecordLayout()

# Control bytes wrapping formatting tags and player names
SENTINEL = 0x02
TERMINATOR = 0x03

# Run widths: 0x02 + 7 payload bytes + 0x03, or 0x02 + 3 payload bytes + 0x03
FORMAT_TAG_LONG = 9
FORMAT_TAG_SHORT = 5

# Metadata block trailing a player name, ending on the second terminator
NAME_SUFFIX_SIZE = 10

# Decoration in front of NPC names
MOB_WRAPPER = bytes([0x20, 0x20, 0xEE, 0x81, 0xAF, 0x20])

# HQ item glyph (private use area) and its plain-text replacement
HQ_ICON = bytes([0xEE, 0x80, 0xBC])
HQ_REPLACEMENT = b"HQ"

# Code points kept in decoded text: (first, last) inclusive
TEXT_RANGES: tuple[tuple[int, int], ...] = (
    (0x0020, 0xD7FF),
    (0xE000, 0xFFFD),
)
TEXT_CONTROLS = frozenset({0x09, 0x0A, 0x0D})

# Slot counts of the game's in-memory tables (read by the memory reader)
CHATLOG_ARRAY_SIZE = 1000
ENTITY_ARRAY_SIZE = 100
PARTY_MEMBER_ARRAY_SIZE = 8
