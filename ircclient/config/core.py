"""Command line and environment handling."""

from __future__ import annotations

import argparse
import os
from collections.abc import Mapping, Sequence

from pydantic import ValidationError

from ..constants import DEFAULT_CHANNEL, DEFAULT_NICK, DEFAULT_SERVER, DEFAULT_USERNAME, PROXY_ENV_VAR
from .model import ClientConfig

_USAGE_EPILOG = f"""\
If <server:port> is not specified or given as !, it is set to "{DEFAULT_SERVER}".
If <channel> is not set, it is set to "{DEFAULT_CHANNEL}".
"""


def build_parser(environ: Mapping[str, str] | None = None) -> argparse.ArgumentParser:
    env = os.environ if environ is None else environ
    parser = argparse.ArgumentParser(
        prog="ircclient",
        description="Command-line IRC client.",
        epilog=_USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--proxy",
        default=env.get(PROXY_ENV_VAR, ""),
        help=f"Proxy server. If not specified, use environment variable {PROXY_ENV_VAR}.",
    )
    parser.add_argument("--nick", default=DEFAULT_NICK, help="Nick name")
    parser.add_argument("--user", dest="username", default=DEFAULT_USERNAME, help="User name")
    parser.add_argument("--pass", dest="password", default="", help="Password if any")
    parser.add_argument(
        "--msgonly",
        dest="msg_only",
        action="store_true",
        help="Only show messages, no join/quit notifications",
    )
    parser.add_argument("server", nargs="?", default="!", metavar="server:port")
    parser.add_argument("channel", nargs="?", default=DEFAULT_CHANNEL)
    return parser


def get_configuration(
    argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None
) -> ClientConfig:
    """Parse ``argv`` into a validated :class:`ClientConfig`.

    Invalid values are reported through ``parser.error`` which exits with
    status 2, like any other usage error.
    """
    parser = build_parser(environ)
    args = parser.parse_args(argv)
    server = DEFAULT_SERVER if args.server == "!" else args.server
    try:
        return ClientConfig(
            server=server,
            channel=args.channel,
            nick=args.nick,
            username=args.username,
            password=args.password,
            proxy=args.proxy,
            msg_only=args.msg_only,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        parser.error(problems)
        raise  # pragma: no cover - parser.error exits


def describe_connection(config: ClientConfig) -> str:
    """Banner printed before dialing, e.g. ``Connecting host:6667 #chan ...``."""
    if config.proxy:
        return f"Connecting {config.server} {config.channel} through proxy {config.proxy} ..."
    return f"Connecting {config.server} {config.channel} ..."
