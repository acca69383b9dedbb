"""Byte stream acquisition: direct TCP or tunnelled through a SOCKS proxy."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from python_socks import ProxyConnectionError, ProxyError, ProxyTimeoutError
from python_socks.async_.asyncio import Proxy

from ..config.model import split_host_port
from ..constants import DEFAULT_PROXY_SCHEME, IRC_CLOSE_TIMEOUT, IRC_CONNECT_TIMEOUT
from ..errors import IRCConnectionError
from ..logs.logger import logger


@dataclass
class Connection:
    """An open stream pair plus where it leads."""

    reader: asyncio.StreamReader
    writer: asyncio.StreamWriter
    target: str
    proxy: str | None = None

    @property
    def closing(self) -> bool:
        return self.writer.is_closing()

    def close(self) -> None:
        if not self.writer.is_closing():
            self.writer.close()
            logger.log_event("transport", "closed", level=logging.DEBUG, target=self.target)

    async def wait_closed(self, timeout: float = IRC_CLOSE_TIMEOUT) -> None:
        self.close()
        try:
            await asyncio.wait_for(self.writer.wait_closed(), timeout=timeout)
        except (OSError, TimeoutError):
            # Peer already gone or slow to acknowledge; the socket is released either way.
            pass


def normalize_proxy_url(proxy: str) -> str:
    """Bare ``host:port`` means SOCKS5; URLs pass through unchanged."""
    proxy = proxy.strip()
    if "://" in proxy:
        return proxy
    return f"{DEFAULT_PROXY_SCHEME}://{proxy}"


async def open_connection(
    address: str, proxy: str | None = None, *, timeout: float = IRC_CONNECT_TIMEOUT
) -> Connection:
    """Open a stream to ``address`` (``host:port``), optionally via ``proxy``.

    No retries: any failure to resolve, connect or finish the proxy
    handshake is raised as IRCConnectionError chained to its cause.
    """
    context: dict[str, object] = {"target": address, "proxy": proxy}
    try:
        host, port = split_host_port(address)
    except ValueError as e:
        raise IRCConnectionError(str(e), data=context) from e

    if proxy:
        logger.log_event("transport", "connect_via_proxy", target=address, proxy=proxy)
    else:
        logger.log_event("transport", "connect_start", target=address)

    try:
        if proxy:
            reader, writer = await _open_via_proxy(host, port, proxy, timeout)
        else:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=timeout
            )
    except (ProxyError, ProxyConnectionError, ProxyTimeoutError, OSError, TimeoutError, ValueError) as e:
        reason = str(e) or type(e).__name__
        logger.log_event(
            "transport",
            "connect_failed",
            level=logging.ERROR,
            target=address,
            error=reason,
            error_type=type(e).__name__,
        )
        via = f" through proxy {proxy}" if proxy else ""
        raise IRCConnectionError(
            f"cannot connect to {address}{via}: {reason}", data=context
        ) from e

    logger.log_event("transport", "connected", target=address)
    return Connection(reader=reader, writer=writer, target=address, proxy=proxy)


async def _open_via_proxy(
    host: str, port: int, proxy: str, timeout: float
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    socks = Proxy.from_url(normalize_proxy_url(proxy))
    sock = await socks.connect(dest_host=host, dest_port=port, timeout=timeout)
    return await asyncio.open_connection(sock=sock)
