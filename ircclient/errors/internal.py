"""Centralized client error hierarchy.

Classes:
  ClientError          – Base for all client errors.
  IRCConnectionError   – Transport setup failed (resolve, connect, proxy handshake).
  ProtocolError        – Malformed or unexpected inbound data, or the stream
                         closed while the session still expected traffic.
  ClosedError          – A write was attempted after the session shut down.

No layer retries on these; they propagate to the top-level caller which
decides whether to exit.
"""

from __future__ import annotations

from collections.abc import Mapping


class ClientError(Exception):
    """Base class for all client errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data
            (target address, offending line, session state, ...).
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class IRCConnectionError(ClientError):
    """Raised when the byte stream to the server cannot be established.

    Carries ``target`` and ``proxy`` in ``data``. Fatal to the process.
    """


class ProtocolError(ClientError):
    """Raised for malformed inbound lines or an unexpected end of stream.

    Fatal to the session: it moves through QUITTING to CLOSED before the
    error reaches the caller.
    """


class ClosedError(ClientError):
    """Raised when writing to a session that is quitting or closed."""


__all__ = [
    "ClientError",
    "IRCConnectionError",
    "ProtocolError",
    "ClosedError",
]
