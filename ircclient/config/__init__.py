"""Client configuration: validated model plus CLI/environment loading."""

from .core import build_parser, describe_connection, get_configuration  # noqa: F401
from .model import ClientConfig, split_host_port  # noqa: F401

__all__ = [
    "ClientConfig",
    "build_parser",
    "describe_connection",
    "get_configuration",
    "split_host_port",
]
