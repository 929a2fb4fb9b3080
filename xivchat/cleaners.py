"""Cleanup passes for the message part of a chat log record.

The client embeds presentation data in the message bytes:
    0x02 XX XX XX 0x03                 short formatting tag
    0x02 XX XX XX XX XX XX XX 0x03     long formatting tag
    <name prefix> 0x03 ... <10 bytes ending on 0x03>   player name wrapper
    20 20 EE 81 AF 20                  NPC name decoration
    EE 80 BC                           HQ item icon

Passes must run in order: formatting tags carry 0x03 bytes of their own and
have to be gone before the name wrapper is located by counting terminators.
Every pass takes bytes and returns new bytes; unmatched input is returned
unchanged.
"""

from __future__ import annotations

from xivchat.constants import (
    FORMAT_TAG_LONG,
    FORMAT_TAG_SHORT,
    HQ_ICON,
    HQ_REPLACEMENT,
    MOB_WRAPPER,
    NAME_SUFFIX_SIZE,
    SENTINEL,
    TERMINATOR,
    TEXT_CONTROLS,
    TEXT_RANGES,
)


def _remove_one_format_tag(buf: bytearray) -> bool:
    """Remove the first removable formatting tag in place. Returns True if one was removed."""
    start = buf.find(SENTINEL)
    while start != -1:
        for width in (FORMAT_TAG_LONG, FORMAT_TAG_SHORT):
            end = start + width - 1
            if end < len(buf) and buf[end] == TERMINATOR:
                del buf[start:end + 1]
                return True
        start = buf.find(SENTINEL, start + 1)
    return False


def strip_format_tags(data: bytes) -> bytes:
    """Remove every 0x02..0x03 formatting tag with a 7 or 3 byte payload.

    A removal shifts everything after it and can line a sentinel up with a
    new terminator, so scanning restarts from the beginning after each one.
    Sentinels without a terminator at either offset are kept.
    """
    buf = bytearray(data)
    while _remove_one_format_tag(buf):
        pass
    return bytes(buf)


def strip_name_prefix(data: bytes) -> bytes:
    """Remove the player name wrapper in front of the message.

    Everything up to and including the first terminator is dropped, then the
    10-byte block ending on the next terminator. A lone terminator is not a
    name wrapper and is left alone.
    """
    if data.count(TERMINATOR) == 1:
        return data
    first = data.find(TERMINATOR)
    if first == -1:
        return data

    buf = bytearray(data[first + 1:])
    second = buf.find(TERMINATOR)
    if second != -1:
        # Real records always have the full block; clamp for truncated ones
        start = max(second - (NAME_SUFFIX_SIZE - 1), 0)
        del buf[start:second + 1]
    return bytes(buf)


def strip_mob_wrapper(data: bytes) -> bytes:
    """Drop the NPC name decoration when the message starts with it."""
    if data.startswith(MOB_WRAPPER):
        return data[len(MOB_WRAPPER):]
    return data


def replace_hq_icon(data: bytes) -> bytes:
    """Replace the HQ icon glyph with a literal "HQ".

    Only the first 0xEE byte is looked at; other private-use glyphs share
    the lead byte, so anything else there leaves the message unchanged.
    """
    idx = data.find(HQ_ICON[0])
    if idx == -1:
        return data
    if data[idx:idx + len(HQ_ICON)] != HQ_ICON:
        return data
    return data[:idx] + HQ_REPLACEMENT + data[idx + len(HQ_ICON):]


def _is_allowed(char: str) -> bool:
    cp = ord(char)
    if cp in TEXT_CONTROLS:
        return True
    return any(first <= cp <= last for first, last in TEXT_RANGES)


def sanitize_text(data: bytes) -> str:
    """Decode UTF-8 (lossy) and drop characters outside the text whitelist."""
    decoded = data.decode("utf-8", errors="replace")
    return "".join(c for c in decoded if _is_allowed(c))


def clean_payload(data: bytes) -> str:
    """Run every cleanup pass over a message payload and return its text."""
    data = strip_format_tags(data)
    data = strip_name_prefix(data)
    data = strip_mob_wrapper(data)
    data = replace_hq_icon(data)
    return sanitize_text(data)
