"""IRC line parsing and formatting.

Pure functions with no I/O so they can be unit tested in isolation.
"""

from __future__ import annotations

from types import MappingProxyType

from ..errors import ProtocolError
from .models import Event

_FORBIDDEN = ("\r", "\n", "\0")
_TAG_ESCAPES = {":": ";", "s": " ", "\\": "\\", "r": "\r", "n": "\n"}


def parse_message(line: str) -> Event:
    """Parse one IRC line (with or without its terminator) into an Event.

    Accepts an optional ``@tags`` section, an optional ``:prefix``, the
    command or three digit reply code, middle parameters and an optional
    trailing parameter introduced by `` :``.

    Raises:
        ProtocolError: If the line is empty, has a prefix but no command,
            or the command token is neither a word nor a reply code.
    """
    raw = line.rstrip("\r\n")
    rest = raw.lstrip(" ")
    if not rest:
        raise ProtocolError("empty line", data={"line": raw})

    tags: dict[str, str] = {}
    if rest.startswith("@"):
        tag_part, _, rest = rest.partition(" ")
        tags = _parse_tags(tag_part[1:])
        rest = rest.lstrip(" ")

    source = ""
    if rest.startswith(":"):
        source, _, rest = rest[1:].partition(" ")
        rest = rest.lstrip(" ")

    message = ""
    if rest.startswith(":"):
        raise ProtocolError("missing command", data={"line": raw})
    head, sep, trailing = rest.partition(" :")
    if sep:
        message = trailing
    tokens = head.split()
    if not tokens:
        raise ProtocolError("missing command", data={"line": raw})

    code = tokens[0]
    if not (code.isascii() and (code.isalpha() or (len(code) == 3 and code.isdigit()))):
        raise ProtocolError(f"invalid command token {code!r}", data={"line": raw})

    numeric = len(code) == 3 and code.isdigit()
    nick, user, host = split_source(source, numeric=numeric)
    return Event(
        code=code.upper(),
        nick=nick,
        message=message,
        arguments=tuple(tokens[1:]),
        user=user,
        host=host,
        source=source,
        tags=MappingProxyType(tags),
        raw=raw,
    )


def split_source(source: str, *, numeric: bool = False) -> tuple[str, str, str]:
    """Split a ``nick!user@host`` prefix into ``(nick, user, host)``.

    A bare prefix (no ``!``/``@``) is a server name, giving an empty nick,
    when it contains a dot or prefixes a numeric reply; only servers send
    numerics, so ``localhost`` is recognised there too.
    """
    if not source:
        return "", "", ""
    if "!" not in source and "@" not in source:
        if numeric or "." in source:
            return "", "", source
        return source, "", ""
    nick, _, rest = source.partition("!")
    if "@" in nick:
        nick, _, host = nick.partition("@")
        return nick, "", host
    user, _, host = rest.partition("@")
    return nick, user, host


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        key, _, value = tag.partition("=")
        tags[key] = _unescape_tag_value(value)
    return tags


def _unescape_tag_value(value: str) -> str:
    if "\\" not in value:
        return value
    out: list[str] = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        out.append(_TAG_ESCAPES.get(nxt, nxt))
    return "".join(out)


def format_message(command: str, *params: str, trailing: str | None = None) -> str:
    """Build a wire line (without CRLF) from a command and its parameters.

    When ``trailing`` is not given, a last parameter that is empty, contains
    a space or starts with ``:`` is sent as the trailing parameter.

    Raises:
        ValueError: If any part contains CR, LF or NUL, the command is
            malformed, or a middle parameter could not be sent as one.
    """
    command = str(command)
    if not command or " " in command or command.startswith(":"):
        raise ValueError(f"invalid command {command!r}")
    parts = [str(p) for p in params]
    if trailing is None and parts and _needs_trailing(parts[-1]):
        trailing = parts.pop()
    for part in (command, *parts, trailing or ""):
        if any(ch in part for ch in _FORBIDDEN):
            raise ValueError("IRC parameters must not contain CR, LF or NUL")
    for part in parts:
        if _needs_trailing(part):
            raise ValueError(f"middle parameter {part!r} must be a single non-empty token")
    line = " ".join([command, *parts])
    if trailing is not None:
        line = f"{line} :{trailing}"
    return line


def _needs_trailing(param: str) -> bool:
    return not param or " " in param or param.startswith(":")
