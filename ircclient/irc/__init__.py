"""IRC subsystem package.

Transport, line parsing, event routing and the protocol session.
"""

from .dispatcher import EventRouter  # noqa: F401
from .models import Command, Event, SessionState  # noqa: F401
from .parser import format_message, parse_message  # noqa: F401
from .session import IRCSession  # noqa: F401
from .transport import Connection, open_connection  # noqa: F401

__all__ = [
    "Command",
    "Connection",
    "Event",
    "EventRouter",
    "IRCSession",
    "SessionState",
    "format_message",
    "open_connection",
    "parse_message",
]
