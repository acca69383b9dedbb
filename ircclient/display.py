"""Transcript formatting: one printed line per interesting event."""

from __future__ import annotations

from collections.abc import Callable

from .irc.dispatcher import EventRouter
from .irc.models import Command, Event

Printer = Callable[[str], None]

# Events shown as "> <code> <message>".
CODE_AND_MESSAGE = (
    Command.MODE,
    Command.NOTICE,
    Command.ERROR,
    Command.RPL_YOURHOST,
    Command.RPL_LUSERCLIENT,
    Command.RPL_LUSEROP,
    Command.RPL_LUSERUNKNOWN,
    Command.RPL_LUSERME,
    Command.RPL_LOCALUSERS,
    Command.RPL_GLOBALUSERS,
    Command.RPL_MOTDSTART,
    Command.RPL_STATSCONN,
)

# Events that produce no output at all.
IGNORED = (
    Command.RPL_NAMREPLY,
    Command.RPL_ENDOFNAMES,
    Command.RPL_MOTD,
    Command.RPL_ENDOFMOTD,
    Command.RPL_CREATED,
    Command.RPL_MYINFO,
    Command.RPL_ISUPPORT,
)


def _arg(event: Event, index: int) -> str:
    return event.arguments[index] if len(event.arguments) > index else ""


def format_default(event: Event) -> str:
    return (
        f"{event.code} {{Code:{event.code} Nick:{event.nick} Source:{event.source} "
        f"Arguments:{list(event.arguments)} Message:{event.message}}}"
    )


def format_join(event: Event) -> str:
    return f"> {event.nick} has joined"


def format_quit(event: Event) -> str:
    return f"> {event.nick} has quit"


def format_part(event: Event) -> str:
    channel = _arg(event, 0) or event.message
    return f"> {event.nick} leaves channel {channel}"


def format_topic(event: Event) -> str:
    return f"> Topic: {event.message}"


def format_privmsg(event: Event) -> str:
    text = event.message
    if text.startswith("\x01ACTION"):
        action = text[len("\x01ACTION"):].rstrip("\x01").strip()
        return f"> * {event.nick} {action}"
    return f"> {event.nick}: {text}"


def format_luserchannels(event: Event) -> str:
    return f"> {_arg(event, 1)} {event.message}"


def format_code_and_message(event: Event) -> str:
    return f"> {event.code} {event.message}"


def _printing(formatter: Callable[[Event], str], printer: Printer) -> Callable[[Event], None]:
    def handler(event: Event) -> None:
        printer(formatter(event))

    return handler


def _ignore(event: Event) -> None:
    return None


def register_display_handlers(
    router: EventRouter, *, msg_only: bool = False, printer: Printer = print
) -> EventRouter:
    """Install the transcript callbacks on ``router`` and return it.

    With ``msg_only`` the default, JOIN, QUIT and PART lines are left out;
    chat, topic and server notices are always shown.
    """
    if not msg_only:
        router.register_default(_printing(format_default, printer))
        router.register(Command.JOIN, _printing(format_join, printer))
        router.register(Command.QUIT, _printing(format_quit, printer))
        router.register(Command.PART, _printing(format_part, printer))

    router.register(Command.RPL_TOPIC, _printing(format_topic, printer))
    router.register(Command.PRIVMSG, _printing(format_privmsg, printer))
    router.register(Command.RPL_LUSERCHANNELS, _printing(format_luserchannels, printer))
    # The formatter reads event.code, so one callback serves every code.
    router.register_many(CODE_AND_MESSAGE, _printing(format_code_and_message, printer))
    router.register_many(IGNORED, _ignore)
    return router
