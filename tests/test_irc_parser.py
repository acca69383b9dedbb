"""
Tests for ircclient.irc.parser
"""

import pytest

from ircclient.errors import ProtocolError
from ircclient.irc.models import Command
from ircclient.irc.parser import format_message, parse_message, split_source


class TestParseMessage:
    """Parsing of inbound lines into events"""

    def test_join_with_full_prefix(self):
        event = parse_message(":alice!al@host.example JOIN #test\r\n")
        assert event.code == "JOIN"
        assert event.command is Command.JOIN
        assert event.nick == "alice"
        assert event.user == "al"
        assert event.host == "host.example"
        assert event.arguments == ("#test",)
        assert event.message == ""

    def test_join_with_trailing_channel(self):
        event = parse_message(":alice!al@host JOIN :#test")
        assert event.code == "JOIN"
        assert event.arguments == ()
        assert event.message == "#test"

    def test_privmsg_trailing_keeps_spaces_and_colons(self):
        event = parse_message(":bob!b@h PRIVMSG #test :hello there: friend")
        assert event.nick == "bob"
        assert event.arguments == ("#test",)
        assert event.message == "hello there: friend"

    def test_without_prefix(self):
        event = parse_message("PING :irc.test")
        assert event.code == "PING"
        assert event.nick == ""
        assert event.source == ""
        assert event.message == "irc.test"

    def test_numeric_reply_is_identifier(self):
        event = parse_message(":irc.test 254 tester 42 :channels formed")
        assert event.code == "254"
        assert event.command is Command.RPL_LUSERCHANNELS
        assert event.is_numeric
        assert event.nick == ""
        assert event.host == "irc.test"
        assert event.arguments == ("tester", "42")
        assert event.message == "channels formed"

    def test_many_middle_args_no_trailing(self):
        event = parse_message(":irc.test MODE #test +o alice")
        assert event.arguments == ("#test", "+o", "alice")
        assert event.message == ""

    def test_command_is_uppercased(self):
        assert parse_message("privmsg #a :x").code == "PRIVMSG"

    def test_unknown_command_kept_as_code(self):
        event = parse_message(":irc.test FOOBAR a b")
        assert event.code == "FOOBAR"
        assert event.command is None

    def test_repeated_spaces_tolerated(self):
        event = parse_message(":irc.test  NOTICE   *   :*** Looking up your hostname")
        assert event.code == "NOTICE"
        assert event.arguments == ("*",)
        assert event.message == "*** Looking up your hostname"

    def test_tags_are_parsed_and_unescaped(self):
        event = parse_message(r"@id=123;msg=a\sb\:c;flag :n!u@h PRIVMSG #x :hi")
        assert event.tags == {"id": "123", "msg": "a b;c", "flag": ""}
        assert event.code == "PRIVMSG"
        assert event.nick == "n"

    def test_tags_are_read_only(self):
        event = parse_message("@a=1 PING :x")
        with pytest.raises(TypeError):
            event.tags["a"] = "2"  # type: ignore[index]

    def test_raw_line_kept_without_terminator(self):
        event = parse_message(":a!b@c QUIT :gone\r\n")
        assert event.raw == ":a!b@c QUIT :gone"

    def test_params_include_trailing(self):
        event = parse_message(":irc.test 332 tester #test :the topic")
        assert event.params == ("tester", "#test", "the topic")

    @pytest.mark.parametrize(
        "line",
        ["", "\r\n", "   ", ":prefix.only", ":irc.test :no command", ":irc.test 12 x", "PRIV-MSG x"],
    )
    def test_malformed_lines_raise(self, line):
        with pytest.raises(ProtocolError):
            parse_message(line)


class TestSplitSource:
    def test_server_name(self):
        assert split_source("irc.libera.chat") == ("", "", "irc.libera.chat")

    def test_bare_nick(self):
        assert split_source("alice") == ("alice", "", "")

    def test_dotless_server_on_numeric(self):
        assert split_source("localhost", numeric=True) == ("", "", "localhost")

    def test_dotless_server_numeric_line_has_no_nick(self):
        event = parse_message(":localhost 001 tester :Welcome")
        assert event.nick == ""
        assert event.host == "localhost"
        assert event.source == "localhost"

    def test_dotless_nick_on_command_line(self):
        event = parse_message(":alice PRIVMSG #test :hi")
        assert event.nick == "alice"

    def test_nick_at_host(self):
        assert split_source("alice@host") == ("alice", "", "host")


class TestFormatMessage:
    """Building outbound wire lines"""

    def test_privmsg_scenario(self):
        assert format_message("PRIVMSG", "#test", trailing="hello there") == "PRIVMSG #test :hello there"

    def test_last_param_with_space_becomes_trailing(self):
        assert format_message("USER", "u", "0", "*", "Real Name") == "USER u 0 * :Real Name"

    def test_single_token_stays_middle(self):
        assert format_message("NICK", "tester") == "NICK tester"

    def test_enum_command(self):
        assert format_message(Command.JOIN, "#go-nuts") == "JOIN #go-nuts"

    def test_empty_trailing(self):
        assert format_message("PONG", trailing="") == "PONG :"

    def test_bare_command(self):
        assert format_message("QUIT") == "QUIT"

    @pytest.mark.parametrize("bad", ["a\r\nQUIT", "line\n", "nul\0"])
    def test_line_breaks_rejected(self, bad):
        with pytest.raises(ValueError):
            format_message("PRIVMSG", "#test", trailing=bad)

    def test_middle_param_with_space_rejected(self):
        with pytest.raises(ValueError):
            format_message("PRIVMSG", "#a b", trailing="x")

    def test_invalid_command_rejected(self):
        with pytest.raises(ValueError):
            format_message("PRIV MSG", "x")

    def test_round_trip_preserves_identifier_and_arguments(self):
        original = parse_message(":irc.test 254 tester 42 :channels formed")
        line = format_message(original.code, *original.arguments, trailing=original.message)
        again = parse_message(line)
        assert again.code == original.code
        assert again.arguments == original.arguments
        assert again.message == original.message
