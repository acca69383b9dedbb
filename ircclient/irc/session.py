"""IRC protocol session: registration, receive loop and serialized writes."""

from __future__ import annotations

import asyncio
import logging
import re

from ..config.model import ClientConfig
from ..constants import IRC_MAX_LINE_BYTES
from ..errors import ClosedError, ProtocolError
from ..logs.logger import logger
from .dispatcher import EventRouter
from .models import Command, Event, SessionState
from .parser import format_message, parse_message
from .transport import Connection

_LINE_BREAKS = re.compile(r"[\r\n]+")

_NICK_REJECTIONS = (
    Command.ERR_ERRONEUSNICKNAME,
    Command.ERR_NICKNAMEINUSE,
    Command.ERR_NICKCOLLISION,
)


class IRCSession:
    """One registration with one server over one Connection.

    States advance ``UNREGISTERED -> REGISTERING -> REGISTERED -> QUITTING
    -> CLOSED``; CLOSED is terminal. ``serve()`` owns the read side, while
    ``join``/``privmsg``/``quit`` may be awaited from other tasks: every
    write takes ``_write_lock`` so lines never interleave on the wire.
    """

    def __init__(self, config: ClientConfig, router: EventRouter | None = None) -> None:
        self.config = config
        self.router = router if router is not None else EventRouter()
        self.state = SessionState.UNREGISTERED
        self.current_nick = config.nick
        self.connection: Connection | None = None
        self._write_lock = asyncio.Lock()
        self._quit_requested = False

    # ------------------------------------------------------------------ state

    def _set_state(self, new_state: SessionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "session",
                "state_change",
                level=logging.DEBUG,
                user=self.current_nick,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    @property
    def registered(self) -> bool:
        return self.state is SessionState.REGISTERED

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    # -------------------------------------------------------------- lifecycle

    async def start(self, connection: Connection) -> None:
        """Register with the server and return once RPL_WELCOME arrives.

        Raises:
            ProtocolError: If the stream ends (or is malformed) before
                registration completes, or the server refuses the nick or
                password. The session is CLOSED afterwards.
        """
        match self.state:
            case SessionState.UNREGISTERED:
                pass
            case (
                SessionState.REGISTERING
                | SessionState.REGISTERED
                | SessionState.QUITTING
                | SessionState.CLOSED
            ):
                raise ProtocolError(f"cannot start a session in state {self.state.name}")

        self.connection = connection
        try:
            await self._send_registration()
            self._set_state(SessionState.REGISTERING)
            logger.log_event("session", "registration_sent", nick=self.config.nick)
            while self.state is SessionState.REGISTERING:
                event = await self._read_event()
                if event is None:
                    raise ProtocolError(
                        "connection closed before registration completed",
                        data={"target": connection.target},
                    )
                await self._handle_registration_event(event)
        except ClosedError as e:
            error = ProtocolError(
                f"connection lost during registration: {e}", data={"target": connection.target}
            )
            await self._fail(error)
            raise error from e
        except ProtocolError as e:
            logger.log_event("session", "registration_failed", level=logging.ERROR, error=str(e))
            await self._fail(e)
            raise

    async def _send_registration(self) -> None:
        password = self.config.password_value()
        if password:
            await self._write(format_message(Command.PASS, password))
        await self._write(format_message(Command.NICK, self.config.nick))
        await self._write(
            format_message(
                Command.USER, self.config.username, "0", "*", trailing=self.config.username
            )
        )

    async def _handle_registration_event(self, event: Event) -> None:
        match event.code:
            case Command.RPL_WELCOME:
                if event.arguments:
                    self.current_nick = event.arguments[0]
                self._set_state(SessionState.REGISTERED)
                logger.log_event("session", "registered", nick=self.current_nick)
                self.router.dispatch(event)
            case Command.ERROR:
                self.router.dispatch(event)
                raise ProtocolError(f"server error during registration: {event.message}")
            case code if code in _NICK_REJECTIONS:
                self.router.dispatch(event)
                raise ProtocolError(
                    f"nickname {self.config.nick!r} rejected ({code}): {event.message}",
                    data={"code": code},
                )
            case Command.ERR_PASSWDMISMATCH:
                self.router.dispatch(event)
                raise ProtocolError("server password rejected", data={"code": event.code})
            case _:
                await self._process(event)

    async def serve(self) -> None:
        """Read and dispatch lines until the stream ends.

        Returns None when the stream ends after ``quit()``.

        Raises:
            ProtocolError: If the stream ends unexpectedly, a line is
                malformed, or the server sends ERROR while registered.
        """
        match self.state:
            case SessionState.REGISTERED | SessionState.QUITTING:
                pass
            case SessionState.UNREGISTERED | SessionState.REGISTERING | SessionState.CLOSED:
                raise ProtocolError(f"cannot serve a session in state {self.state.name}")

        logger.log_event("session", "serve_start", level=logging.DEBUG, user=self.current_nick)
        try:
            while (event := await self._read_event()) is not None:
                await self._process(event)
                if event.code == Command.ERROR and not self._quit_requested:
                    logger.log_event(
                        "session", "server_error", level=logging.ERROR, message=event.message
                    )
                    raise ProtocolError(f"server closed the link: {event.message}")
        except ProtocolError as e:
            await self._fail(e)
            raise

        if self._quit_requested:
            if self.connection is not None:
                await self.connection.wait_closed()
            self._set_state(SessionState.CLOSED)
            logger.log_event("session", "serve_end", level=logging.DEBUG, user=self.current_nick)
            return None

        error = ProtocolError("connection closed by server")
        await self._fail(error)
        raise error

    async def quit(self, message: str | None = None) -> None:
        """Send QUIT once and close the transport.

        Later calls are no-ops, so a second QUIT never reaches the wire.
        """
        match self.state:
            case SessionState.QUITTING | SessionState.CLOSED:
                return
            case SessionState.UNREGISTERED:
                self._quit_requested = True
                if self.connection is not None:
                    self.connection.close()
                self._set_state(SessionState.CLOSED)
                return
            case SessionState.REGISTERING | SessionState.REGISTERED:
                pass

        # A message that cannot go on the wire must leave the session untouched.
        line = format_message(Command.QUIT, trailing=message) if message else str(Command.QUIT)
        self._quit_requested = True
        self._set_state(SessionState.QUITTING)
        try:
            await self._write(line, allow_quitting=True)
            logger.log_event("session", "quit_sent", level=logging.DEBUG, user=self.current_nick)
        except ClosedError:
            # The write path already logged and closed; nothing left to tell the server.
            return
        finally:
            if self.connection is not None:
                self.connection.close()

    async def close(self) -> None:
        """Quit if needed and wait for the transport to finish closing."""
        await self.quit()
        if self.connection is not None:
            await self.connection.wait_closed()
        self._set_state(SessionState.CLOSED)

    async def _fail(self, error: ProtocolError) -> None:
        logger.log_event("session", "protocol_error", level=logging.ERROR, error=str(error))
        match self.state:
            case SessionState.CLOSED:
                return
            case (
                SessionState.UNREGISTERED
                | SessionState.REGISTERING
                | SessionState.REGISTERED
                | SessionState.QUITTING
            ):
                self._set_state(SessionState.QUITTING)
        if self.connection is not None:
            await self.connection.wait_closed()
        self._set_state(SessionState.CLOSED)

    # ---------------------------------------------------------------- inbound

    async def _process(self, event: Event) -> None:
        match event.code:
            case Command.PING:
                token = event.message or (event.arguments[0] if event.arguments else "")
                try:
                    await self._write(
                        format_message(Command.PONG, trailing=token), allow_quitting=True
                    )
                except ClosedError as e:
                    if self._quit_requested:
                        return
                    raise ProtocolError(f"cannot answer PING: {e}") from e
                logger.log_event("session", "ping", level=logging.DEBUG, token=token)
                return
            case Command.NICK if event.nick == self.current_nick:
                new_nick = event.message or (event.arguments[0] if event.arguments else "")
                if new_nick:
                    logger.log_event(
                        "session", "nick_changed", old_nick=self.current_nick, new_nick=new_nick
                    )
                    self.current_nick = new_nick
            case _:
                pass
        self.router.dispatch(event)

    async def _read_event(self) -> Event | None:
        """Next parsed event, or None at end of stream. Blank lines are skipped."""
        while True:
            line = await self._read_line()
            if line is None:
                return None
            if not line.strip():
                continue
            logger.log_event("session", "raw_in", level=logging.DEBUG, line=line)
            return parse_message(line)

    async def _read_line(self) -> str | None:
        if self.connection is None:
            return None
        try:
            data = await self.connection.reader.readline()
        except ValueError as e:
            # StreamReader raises ValueError when a line exceeds its buffer limit
            raise ProtocolError(f"inbound line too long: {e}") from e
        except OSError as e:
            if self._quit_requested:
                return None
            raise ProtocolError(f"read failed: {e}") from e
        if not data:
            return None
        if not data.endswith(b"\n"):
            if self._quit_requested:
                return None
            raise ProtocolError(
                "connection closed in the middle of a line",
                data={"partial": data[:80].decode(self.config.encoding, errors="replace")},
            )
        return data.decode(self.config.encoding, errors="replace").rstrip("\r\n")

    # --------------------------------------------------------------- outbound

    async def join(self, channel: str, key: str | None = None) -> None:
        params = (channel, key) if key else (channel,)
        await self._write(format_message(Command.JOIN, *params))

    async def part(self, channel: str, reason: str | None = None) -> None:
        await self._write(format_message(Command.PART, channel, trailing=reason))

    async def privmsg(self, target: str, text: str) -> None:
        """Send ``text`` to ``target``; each line of a multi-line text is its own PRIVMSG."""
        for line in self._split_text(text):
            await self._write(format_message(Command.PRIVMSG, target, trailing=line))

    async def notice(self, target: str, text: str) -> None:
        for line in self._split_text(text):
            await self._write(format_message(Command.NOTICE, target, trailing=line))

    async def send(self, command: str, *params: str, trailing: str | None = None) -> None:
        await self._write(format_message(command, *params, trailing=trailing))

    @staticmethod
    def _split_text(text: str) -> list[str]:
        lines = [line for line in _LINE_BREAKS.split(text) if line]
        if not lines:
            raise ValueError("message text must not be empty")
        return lines

    def _ensure_writable(self, allow_quitting: bool) -> Connection:
        match self.state:
            case SessionState.UNREGISTERED | SessionState.REGISTERING | SessionState.REGISTERED:
                pass
            case SessionState.QUITTING:
                if not allow_quitting:
                    raise ClosedError("session is quitting")
            case SessionState.CLOSED:
                raise ClosedError("session is closed")
        if self.connection is None:
            raise ClosedError("session is not connected")
        return self.connection

    async def _write(self, line: str, *, allow_quitting: bool = False) -> None:
        self._ensure_writable(allow_quitting)
        data = f"{line}\r\n".encode(self.config.encoding)
        if len(data) > IRC_MAX_LINE_BYTES:
            logger.log_event("session", "line_too_long", level=logging.WARNING, length=len(data))
        async with self._write_lock:
            # State may have moved on while waiting for the lock.
            connection = self._ensure_writable(allow_quitting)
            try:
                connection.writer.write(data)
                await connection.writer.drain()
            except OSError as e:
                logger.log_event("session", "write_failed", level=logging.ERROR, error=str(e))
                self._set_state(SessionState.CLOSED)
                connection.close()
                raise ClosedError(f"write failed: {e}", data={"target": connection.target}) from e
        logger.log_event("session", "raw_out", level=logging.DEBUG, line=_redact(line))


def _redact(line: str) -> str:
    if line.startswith(f"{Command.PASS} "):
        return f"{Command.PASS} ****"
    return line
