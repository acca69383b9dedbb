"""
In-memory stand-ins for the asyncio stream pair used by the session.
"""

import asyncio

from ircclient.config import ClientConfig
from ircclient.irc.transport import Connection

WELCOME = b":irc.test 001 tester :Welcome to the test network tester\r\n"


class FakeWriter:
    """Records written bytes; closing it ends the paired reader like a real socket."""

    def __init__(self, reader: asyncio.StreamReader | None = None):
        self.reader = reader
        self.data = bytearray()
        self.writes: list[bytes] = []
        self.closed = False
        self.fail_with: Exception | None = None
        self.drain_delay = 0.0

    def write(self, data: bytes) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.writes.append(bytes(data))
        self.data += data

    async def drain(self) -> None:
        if self.drain_delay:
            await asyncio.sleep(self.drain_delay)
        else:
            await asyncio.sleep(0)

    def is_closing(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True
        if self.reader is not None and not self.reader.at_eof():
            self.reader.feed_eof()

    async def wait_closed(self) -> None:
        return None

    @property
    def lines(self) -> list[str]:
        return [line for line in self.data.decode("utf-8").split("\r\n") if line]


def make_connection() -> tuple[Connection, asyncio.StreamReader, FakeWriter]:
    """Must be called with a running event loop."""
    reader = asyncio.StreamReader()
    writer = FakeWriter(reader)
    conn = Connection(reader=reader, writer=writer, target="irc.test:6667")  # type: ignore[arg-type]
    return conn, reader, writer


def make_config(**overrides) -> ClientConfig:
    values = {"server": "irc.test:6667", "channel": "#test", "nick": "tester", "username": "tester"}
    values.update(overrides)
    return ClientConfig(**values)
