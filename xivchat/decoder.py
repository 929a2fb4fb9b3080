"""Decoder for raw chat log records copied out of game memory.

Record layout:
    [0..7]   timestamp, seconds since epoch as 8 ASCII hex digits
    [8..11]  channel code, 4 ASCII characters
    [12..]   separator, "::" or a single byte
    [...]    message bytes with embedded formatting (see cleaners)

Decoding never raises. A record whose header cannot be read still yields an
entry carrying raw bytes and text, with a status saying where it stopped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from datetime import datetime, timezone

from xivchat.cleaners import clean_payload
from xivchat.constants import DEFAULT_LAYOUT, RecordLayout
from xivchat.entry import DecodedEntry, DecodeStatus

logger = logging.getLogger(__name__)

# Hex digits with optional surrounding ASCII whitespace; int(x, 16) alone
# would also accept signs, "0x" and "_"
_RE_HEX = re.compile(rb"[ \t\n\v\f\r]*([0-9A-Fa-f]+)[ \t\n\v\f\r]*")


def parse_timestamp(field: bytes) -> datetime | None:
    """Parse a hex seconds-since-epoch field into a local, tz-aware datetime."""
    m = _RE_HEX.fullmatch(field)
    if m is None:
        return None
    seconds = int(m.group(1), 16)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone()
    except (OverflowError, OSError, ValueError):
        return None


def extract_code(field: bytes) -> str:
    """Decode the channel code field."""
    return field.decode("utf-8", errors="replace")


def strip_separator(data: bytes, layout: RecordLayout = DEFAULT_LAYOUT) -> bytes:
    """Remove the separator after the code: two bytes when doubled, else one.

    With fewer than two bytes left there is nothing to look ahead at; one
    byte (or nothing) is removed.
    """
    if len(data) >= 2 and data[1] == layout.separator:
        return data[2:]
    return data[1:]


def decode_entry(raw: bytes, layout: RecordLayout = DEFAULT_LAYOUT) -> DecodedEntry:
    """Decode one raw record.

    Returns a DecodedEntry whose status tells how far decoding got.
    """
    raw = bytes(raw)
    raw_text = raw.decode("utf-8", errors="replace")

    if len(raw) < layout.header_size:
        logger.debug("Record too short (%d bytes)", len(raw))
        return DecodedEntry(raw=raw, raw_text=raw_text, status=DecodeStatus.TOO_SHORT)

    timestamp = parse_timestamp(raw[:layout.timestamp_size])
    if timestamp is None:
        logger.debug("Invalid timestamp field %r", raw[:layout.timestamp_size])
        return DecodedEntry(
            raw=raw, raw_text=raw_text, status=DecodeStatus.TIMESTAMP_INVALID,
        )

    rest = raw[layout.timestamp_size:]
    code = extract_code(rest[:layout.code_size])
    rest = strip_separator(rest[layout.code_size:], layout)

    return DecodedEntry(
        raw=raw,
        raw_text=raw_text,
        timestamp=timestamp,
        code=code,
        text=clean_payload(rest),
        status=DecodeStatus.OK,
    )


def decode_records(
    records: Iterable[bytes],
    layout: RecordLayout = DEFAULT_LAYOUT,
) -> Iterator[DecodedEntry]:
    """Decode a sequence of raw records, one entry per record.

    Bad records come out as incomplete entries; the batch is never cut short.
    """
    total = 0
    failed = 0
    for raw in records:
        entry = decode_entry(raw, layout)
        total += 1
        if not entry.is_complete:
            failed += 1
        yield entry
    if failed:
        logger.info("Decoded %d records, %d incomplete", total, failed)
