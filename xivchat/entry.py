"""Decoded chat log entry."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from xivchat.channels import Channel, channel_for_code


class DecodeStatus(Enum):
    OK = "ok"
    TOO_SHORT = "too_short"
    TIMESTAMP_INVALID = "timestamp_invalid"


@dataclass(frozen=True, slots=True)
class DecodedEntry:
    """One chat log record, decoded as far as its header allowed.

    Fields fill strictly left to right: ``code`` is only set when
    ``timestamp`` is, and ``text`` only when ``code`` is.
    """

    raw: bytes
    raw_text: str
    timestamp: datetime | None = None
    code: str | None = None
    text: str | None = None
    status: DecodeStatus = DecodeStatus.OK

    @property
    def is_complete(self) -> bool:
        return self.text is not None

    @property
    def channel(self) -> Channel | None:
        if self.code is None:
            return None
        return channel_for_code(self.code)

    def to_dict(self) -> dict[str, object]:
        """JSON-friendly view of the entry (raw bytes as hex)."""
        channel = self.channel
        return {
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "code": self.code,
            "channel": channel.value if channel else None,
            "text": self.text,
            "raw": self.raw.hex(),
            "raw_text": self.raw_text,
        }
