from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from ..constants import (
    DEFAULT_CHANNEL,
    DEFAULT_NICK,
    DEFAULT_SERVER,
    DEFAULT_USERNAME,
    IRC_ENCODING,
)


def split_host_port(address: str) -> tuple[str, int]:
    """Split ``host:port`` (or ``[v6]:port``) into its parts.

    Raises:
        ValueError: If the host is empty or the port is missing, non-numeric
            or out of range.
    """
    address = address.strip()
    host, sep, port_text = address.rpartition(":")
    if not sep or not host:
        raise ValueError(f"address must be host:port, got {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"IPv6 hosts must be bracketed, got {address!r}")
    if not host:
        raise ValueError(f"address must be host:port, got {address!r}")
    if not port_text.isdigit() or not 0 < int(port_text) < 65536:
        raise ValueError(f"invalid port in {address!r}")
    return host, int(port_text)


def _require_token(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be empty")
    if any(ch.isspace() for ch in value):
        raise ValueError(f"{field} must not contain whitespace")
    return value


class ClientConfig(BaseModel):
    """Everything the session needs to know, supplied once at construction.

    Attributes:
        server: ``host:port`` of the IRC server.
        channel: Channel joined after registration and target of input lines.
        nick: Requested nickname.
        username: USER name (also used as the real name).
        password: Optional server password sent with PASS.
        proxy: Optional SOCKS proxy, URL or bare ``host:port``.
        msg_only: Only show chat messages, no join/part/quit notices.
    """

    model_config = ConfigDict(frozen=True)

    server: str = DEFAULT_SERVER
    channel: str = DEFAULT_CHANNEL
    nick: str = DEFAULT_NICK
    username: str = DEFAULT_USERNAME
    password: SecretStr | None = None
    proxy: str | None = None
    msg_only: bool = False
    encoding: str = Field(default=IRC_ENCODING, min_length=1)

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        split_host_port(v)
        return v.strip()

    @field_validator("nick")
    @classmethod
    def validate_nick(cls, v: str) -> str:
        v = _require_token(v, "nick")
        if v[0] in "#&:" or v[0].isdigit():
            raise ValueError("nick must not start with a digit, '#', '&' or ':'")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _require_token(v, "username")

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, v: str) -> str:
        v = _require_token(v, "channel")
        if "," in v or "\x07" in v:
            raise ValueError("channel must not contain ',' or BEL")
        return v

    @field_validator("password", mode="before")
    @classmethod
    def empty_password_is_none(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v):
            return None
        return v

    @field_validator("proxy", mode="before")
    @classmethod
    def empty_proxy_is_none(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @property
    def host(self) -> str:
        return split_host_port(self.server)[0]

    @property
    def port(self) -> int:
        return split_host_port(self.server)[1]

    def password_value(self) -> str | None:
        return self.password.get_secret_value() if self.password else None
