"""
Tests for the client error hierarchy and log_error
"""

import logging

import pytest

from ircclient.errors import (
    ClientError,
    ClosedError,
    IRCConnectionError,
    ProtocolError,
    classify_error,
    log_error,
)


class TestClientError:
    def test_data_defaults_to_empty_dict(self):
        error = ProtocolError("bad line")
        assert str(error) == "bad line"
        assert error.data == {}

    def test_data_is_copied(self):
        context = {"target": "irc.test:6667"}
        error = IRCConnectionError("refused", data=context)
        context["target"] = "changed"
        assert error.data == {"target": "irc.test:6667"}

    @pytest.mark.parametrize("cls", [IRCConnectionError, ProtocolError, ClosedError])
    def test_hierarchy(self, cls):
        assert issubclass(cls, ClientError)


@pytest.mark.parametrize(
    ("error", "category"),
    [
        (IRCConnectionError("x"), "connection"),
        (ProtocolError("x"), "protocol"),
        (ClosedError("x"), "closed"),
        (ConnectionResetError(), "network"),
        (TimeoutError(), "network"),
        (ClientError("x"), "internal"),
        (KeyError("x"), "unknown"),
    ],
)
def test_classify_error(error, category):
    assert classify_error(error) == category


class TestLogError:
    def test_merges_error_data_and_context(self, caplog):
        caplog.set_level(logging.ERROR, logger="ircclient")
        error = IRCConnectionError(
            "cannot connect", data={"target": "irc.test:6667", "proxy": None}
        )
        log_error("IRC session failed", error, {"proxy": "p:1"})

        message = caplog.records[-1].getMessage()
        assert message.startswith("[CONNECTION] IRC session failed: cannot connect")
        assert "Exception: IRCConnectionError: cannot connect" in message
        assert "Context: target=irc.test:6667 | proxy=p:1" in message

    def test_plain_exception_without_context(self, caplog):
        caplog.set_level(logging.ERROR, logger="ircclient")
        log_error("Top-level error", RuntimeError("boom"))
        message = caplog.records[-1].getMessage()
        assert message == "[UNKNOWN] Top-level error: boom | Exception: RuntimeError: boom"
