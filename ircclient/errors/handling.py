from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import ClientError, ClosedError, IRCConnectionError, ProtocolError


def classify_error(error: BaseException) -> str:
    """Return the structured-log category for ``error``."""
    if isinstance(error, IRCConnectionError):
        return "connection"
    if isinstance(error, ProtocolError):
        return "protocol"
    if isinstance(error, ClosedError):
        return "closed"
    if isinstance(error, OSError | ConnectionError | TimeoutError):
        return "network"
    if isinstance(error, ClientError):
        return "internal"
    return "unknown"


def log_error(
    message: str, error: BaseException, context: dict[str, object] | None = None
) -> None:
    """Log ``error`` with its category and any context it carries.

    Context attached to a ``ClientError`` (``error.data``) is merged under the
    caller supplied ``context``.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    merged: dict[str, object] = {}
    if isinstance(error, ClientError):
        merged.update(error.data)
    if context:
        merged.update(context)
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {error}",
        exception=error,
        context=merged or None,
    )
