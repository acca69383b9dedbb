r"""
Logging configuration module for the IRC client.

Diagnostics go to stderr through colorlog; stdout is left to the chat
transcript so the two never interleave on a pipe.
"""

import logging
import os
import sys
from typing import Any

import colorlog

_LOG_FORMAT = (
    "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s "
    "%(message_log_color)s%(message)s"
)


def is_debug_enabled(environ: dict[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get("DEBUG", "").lower() in ("true", "1", "yes")


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with its category and structured context.

    The resulting line reads ``[TYPE] message | Exception: ... | Context: k=v``.

    Args:
        error_type: Category of the error (e.g. 'connection', 'protocol').
        message: Descriptive error message.
        exception: The exception that occurred (optional).
        context: Additional context data for debugging.
        level: Logging level (default: ERROR).
    """
    structured_message = f"[{error_type.upper()}] {message}"

    if exception is not None:
        structured_message += f" | Exception: {type(exception).__name__}: {exception}"

    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.getLogger("ircclient").log(level, structured_message)


class LoggerConfigurator:
    """Handles logging configuration using colorlog.

    Uses environment variables:
    - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO
    """

    def __init__(self, stream=None, environ: dict[str, str] | None = None):
        self.stream = stream if stream is not None else sys.stderr
        self.environ = environ

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            _LOG_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self) -> int:
        """Install the colored stderr handler on the root logger.

        Returns the level that was applied.
        """
        log_level = logging.DEBUG if is_debug_enabled(self.environ) else logging.INFO

        handler = logging.StreamHandler(self.stream)
        handler.setFormatter(self.build_formatter())

        root_logger = logging.getLogger()
        for existing in list(root_logger.handlers):
            root_logger.removeHandler(existing)
        root_logger.addHandler(handler)
        root_logger.setLevel(log_level)

        logging.getLogger("asyncio").setLevel(logging.WARNING)
        return log_level
