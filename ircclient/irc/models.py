"""Shared IRC data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, StrEnum, auto
from types import MappingProxyType


class SessionState(Enum):
    UNREGISTERED = auto()
    REGISTERING = auto()
    REGISTERED = auto()
    QUITTING = auto()
    CLOSED = auto()


class Command(StrEnum):
    """Command words and reply codes the client refers to by name.

    Members compare equal to their wire token (``Command.RPL_WELCOME ==
    "001"``). Tokens outside this set still flow through as plain strings.
    """

    PASS = "PASS"
    NICK = "NICK"
    USER = "USER"
    JOIN = "JOIN"
    PART = "PART"
    QUIT = "QUIT"
    PRIVMSG = "PRIVMSG"
    NOTICE = "NOTICE"
    MODE = "MODE"
    TOPIC = "TOPIC"
    KICK = "KICK"
    PING = "PING"
    PONG = "PONG"
    ERROR = "ERROR"

    RPL_WELCOME = "001"
    RPL_YOURHOST = "002"
    RPL_CREATED = "003"
    RPL_MYINFO = "004"
    RPL_ISUPPORT = "005"
    RPL_STATSCONN = "250"
    RPL_LUSERCLIENT = "251"
    RPL_LUSEROP = "252"
    RPL_LUSERUNKNOWN = "253"
    RPL_LUSERCHANNELS = "254"
    RPL_LUSERME = "255"
    RPL_LOCALUSERS = "265"
    RPL_GLOBALUSERS = "266"
    RPL_TOPIC = "332"
    RPL_NAMREPLY = "353"
    RPL_ENDOFNAMES = "366"
    RPL_MOTD = "372"
    RPL_MOTDSTART = "375"
    RPL_ENDOFMOTD = "376"

    ERR_ERRONEUSNICKNAME = "432"
    ERR_NICKNAMEINUSE = "433"
    ERR_NICKCOLLISION = "436"
    ERR_PASSWDMISMATCH = "464"

    @classmethod
    def lookup(cls, token: str) -> Command | None:
        try:
            return cls(token)
        except ValueError:
            return None


def event_key(event_id: str) -> str:
    """Normalize an identifier to the wire token used as a table key."""
    if isinstance(event_id, Enum):
        return str(event_id.value)
    return str(event_id).upper()


@dataclass(frozen=True, slots=True)
class Event:
    """One parsed inbound line.

    ``arguments`` holds the middle parameters only; the trailing parameter
    is ``message``. ``nick`` is empty for server-originated lines.
    """

    code: str
    nick: str = ""
    message: str = ""
    arguments: tuple[str, ...] = ()
    user: str = ""
    host: str = ""
    source: str = ""
    tags: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    raw: str = ""

    @property
    def command(self) -> Command | None:
        return Command.lookup(self.code)

    @property
    def is_numeric(self) -> bool:
        return len(self.code) == 3 and self.code.isdigit()

    @property
    def params(self) -> tuple[str, ...]:
        """Middle parameters followed by the trailing one, if any."""
        return self.arguments + ((self.message,) if self.message else ())
