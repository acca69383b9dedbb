from __future__ import annotations

import pytest

from ircclient.errors import ProtocolError
from ircclient.irc.parser import parse_message


def test_parse_malformed_missing_spaces():  # type: ignore[no-untyped-def]
    raw = ":nick!user@hostPRIVMSG#chan:hello"  # missing space before command
    # The whole line is taken as a prefix, leaving no command
    with pytest.raises(ProtocolError) as excinfo:
        parse_message(raw)
    assert excinfo.value.data["line"] == raw


def test_parse_tag_without_command():  # type: ignore[no-untyped-def]
    with pytest.raises(ProtocolError):
        parse_message("@badge=1;color=red")


def test_tag_trailing_backslash_dropped():  # type: ignore[no-untyped-def]
    msg = parse_message("@k=abc\\ PING :x")
    assert msg.tags["k"] == "abc"


def test_privmsg_without_text():  # type: ignore[no-untyped-def]
    msg = parse_message(":nick!u@h PRIVMSG #room")
    assert msg.arguments == ("#room",)
    assert msg.message == ""


def test_empty_trailing_parameter():  # type: ignore[no-untyped-def]
    msg = parse_message(":nick!u@h TOPIC #room :")
    assert msg.arguments == ("#room",)
    assert msg.message == ""


def test_prefix_with_bang_but_no_host():  # type: ignore[no-untyped-def]
    msg = parse_message(":nick!user QUIT :bye")
    assert (msg.nick, msg.user, msg.host) == ("nick", "user", "")
