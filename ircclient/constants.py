"""
Configuration constants for the IRC client

Defaults for the command line and the few timing knobs of the transport.
Each numeric constant can be overridden by setting an environment variable
with the same name.
"""

import os
import sys


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Falls back to ``default`` (with a warning on stderr) when the variable is
    unset or cannot be parsed.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}",
                file=sys.stderr,
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable."""
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}",
                file=sys.stderr,
            )
    return default


# Command line defaults
DEFAULT_SERVER = "irc.freenode.net:6667"
DEFAULT_CHANNEL = "#go-nuts"
DEFAULT_NICK = "Guest"
DEFAULT_USERNAME = "User"
PROXY_ENV_VAR = "IRC_PROXY"
DEFAULT_PROXY_SCHEME = "socks5"

# Transport
IRC_CONNECT_TIMEOUT = _get_env_float(
    "IRC_CONNECT_TIMEOUT", 30.0
)  # Seconds allowed for TCP connect plus proxy handshake
IRC_CLOSE_TIMEOUT = _get_env_float(
    "IRC_CLOSE_TIMEOUT", 5.0
)  # Seconds to wait for the writer to finish closing

# Protocol
IRC_MAX_LINE_BYTES = _get_env_int(
    "IRC_MAX_LINE_BYTES", 512
)  # RFC 1459 line limit including CRLF; longer lines are sent with a warning
IRC_ENCODING = "utf-8"
