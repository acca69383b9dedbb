#!/usr/bin/env python3
"""
Main entry point for the IRC client
"""

import asyncio
import logging
import sys
from collections.abc import Sequence

from .client import IRCClient
from .config import get_configuration
from .errors import ClientError, log_error
from .logging_config import LoggerConfigurator
from .logs.logger import logger


async def main(argv: Sequence[str] | None = None) -> int:
    """Run one client session and return the process exit status.

    Connection and protocol failures are reported and mapped to status 1;
    nothing is retried.
    """
    config = get_configuration(argv)
    logger.log_event("app", "start", level=logging.DEBUG)
    client = IRCClient(config)
    try:
        await client.run()
    except ClientError as e:
        log_error("IRC session failed", e)
        return 1
    finally:
        logger.log_event("app", "shutdown", level=logging.DEBUG)
    return 0


def run(argv: Sequence[str] | None = None) -> None:
    """Synchronous entry point for the console script.

    Raises:
        SystemExit: Always, with the session's exit status.
    """
    LoggerConfigurator().configure()
    try:
        status = asyncio.run(main(argv))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        sys.exit(0)
    except Exception as e:
        log_error("Top-level error", e)
        sys.exit(1)
    sys.exit(status)


if __name__ == "__main__":
    run()
