"""Client wiring: config -> transport -> session, plus the stdin input loop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
import threading
from collections.abc import Awaitable, Callable
from typing import TextIO

from .config import ClientConfig, describe_connection
from .display import Printer, register_display_handlers
from .errors import ClosedError
from .irc.dispatcher import EventRouter
from .irc.session import IRCSession
from .irc.transport import Connection, open_connection
from .logs.logger import logger

QUIT_COMMAND = "/quit"

Connector = Callable[[str, str | None], Awaitable[Connection]]


class StdinReader:
    """Pumps lines from a blocking text stream into an asyncio queue.

    Runs in a daemon thread so a pending ``readline`` never holds up process
    exit. End of input is signalled by putting ``None``.
    """

    def __init__(
        self,
        stream: TextIO,
        loop: asyncio.AbstractEventLoop,
        queue: asyncio.Queue[str | None],
    ) -> None:
        self.stream = stream
        self.loop = loop
        self.queue = queue
        self.thread = threading.Thread(target=self._run, name="irc-stdin", daemon=True)

    def start(self) -> None:
        self.thread.start()

    def _run(self) -> None:
        while True:
            try:
                line = self.stream.readline()
            except (OSError, ValueError):
                line = ""
            try:
                self.loop.call_soon_threadsafe(self.queue.put_nowait, line or None)
            except RuntimeError:
                # Event loop already closed during shutdown.
                return
            if not line:
                return


class IRCClient:
    def __init__(
        self,
        config: ClientConfig,
        *,
        router: EventRouter | None = None,
        stdin: TextIO | None = None,
        printer: Printer = print,
        connect: Connector = open_connection,
    ) -> None:
        self.config = config
        self.printer = printer
        self.router = register_display_handlers(
            router if router is not None else EventRouter(),
            msg_only=config.msg_only,
            printer=printer,
        )
        self.session = IRCSession(config, self.router)
        self.stdin = stdin if stdin is not None else sys.stdin
        self._connect = connect
        self._input_task: asyncio.Task[None] | None = None

    async def run(self) -> None:
        """Connect, register, join and serve until the session ends.

        Raises:
            IRCConnectionError: If the transport cannot be opened.
            ProtocolError: If registration fails or the session ends abnormally.
        """
        self.printer(describe_connection(self.config))
        connection = await self._connect(self.config.server, self.config.proxy)
        await self.session.start(connection)
        await self.session.join(self.config.channel)

        queue: asyncio.Queue[str | None] = asyncio.Queue()
        StdinReader(self.stdin, asyncio.get_running_loop(), queue).start()
        logger.log_event("input", "start", level=logging.DEBUG)
        self._input_task = asyncio.create_task(self.pump_input(queue), name="irc-input")
        try:
            await self.session.serve()
        finally:
            self._input_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._input_task

    async def pump_input(self, queue: asyncio.Queue[str | None]) -> None:
        while await self.handle_input(await queue.get()):
            pass

    async def handle_input(self, line: str | None) -> bool:
        """Act on one input line. Returns False once input handling should stop."""
        if line is None:
            logger.log_event("input", "eof")
            await self.session.quit()
            return False
        text = line.rstrip("\r\n")
        if text == QUIT_COMMAND:
            logger.log_event("input", "quit_command", level=logging.DEBUG)
            await self.session.quit()
            return False
        if not text:
            return True
        try:
            await self.session.privmsg(self.config.channel, text)
        except ClosedError as e:
            logger.log_event("input", "send_failed", level=logging.WARNING, error=str(e))
            return False
        except ValueError as e:
            logger.log_event("input", "send_failed", level=logging.WARNING, error=str(e))
        return True
