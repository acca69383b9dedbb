"""Error taxonomy and reporting helpers."""

from .handling import classify_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    ClientError,
    ClosedError,
    IRCConnectionError,
    ProtocolError,
)

__all__ = [
    "ClientError",
    "ClosedError",
    "IRCConnectionError",
    "ProtocolError",
    "classify_error",
    "log_error",
]
