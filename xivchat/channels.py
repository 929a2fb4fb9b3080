"""Chat channel codes found in the record header."""

from __future__ import annotations

from enum import Enum


class Channel(Enum):
    SAY = "Say"
    SHOUT = "Shout"
    TELL_TO = "Tell To"
    TELL_FROM = "Tell From"
    PARTY = "Party"
    ALLIANCE = "Alliance"
    LINKSHELL_1 = "Linkshell 1"
    LINKSHELL_2 = "Linkshell 2"
    LINKSHELL_3 = "Linkshell 3"
    LINKSHELL_4 = "Linkshell 4"
    LINKSHELL_5 = "Linkshell 5"
    LINKSHELL_6 = "Linkshell 6"
    LINKSHELL_7 = "Linkshell 7"
    LINKSHELL_8 = "Linkshell 8"
    FREE_COMPANY = "Free Company"
    NOVICE_NETWORK = "Novice Network"
    CUSTOM_EMOTE = "Custom Emote"
    STANDARD_EMOTE = "Emote"
    YELL = "Yell"
    ECHO = "Echo"
    SYSTEM = "System"
    ERROR = "Error"


# Header codes are 4 hex digits, upper case in the client
_CODE_MAP: dict[str, Channel] = {
    "000A": Channel.SAY,
    "000B": Channel.SHOUT,
    "000C": Channel.TELL_TO,
    "000D": Channel.TELL_FROM,
    "000E": Channel.PARTY,
    "000F": Channel.ALLIANCE,
    "0010": Channel.LINKSHELL_1,
    "0011": Channel.LINKSHELL_2,
    "0012": Channel.LINKSHELL_3,
    "0013": Channel.LINKSHELL_4,
    "0014": Channel.LINKSHELL_5,
    "0015": Channel.LINKSHELL_6,
    "0016": Channel.LINKSHELL_7,
    "0017": Channel.LINKSHELL_8,
    "0018": Channel.FREE_COMPANY,
    "001B": Channel.NOVICE_NETWORK,
    "001C": Channel.CUSTOM_EMOTE,
    "001D": Channel.STANDARD_EMOTE,
    "001E": Channel.YELL,
    "0038": Channel.ECHO,
    "0039": Channel.SYSTEM,
    "003C": Channel.ERROR,
}


def channel_for_code(code: str) -> Channel | None:
    """Map a 4-character header code to a Channel, None if unknown."""
    return _CODE_MAP.get(code.upper())
