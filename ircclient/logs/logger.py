"""Structured event logger."""

from __future__ import annotations

import logging

from ..logging_config import is_debug_enabled
from .event_catalog import EVENT_TEMPLATES


class ClientLogger:
    """Emits ``domain_action`` events with a human readable rendering.

    The human text comes from the template catalog when one exists for
    ``(domain, action)``; otherwise it is derived from the names. In debug
    mode the remaining context is appended as ``key=value`` pairs.
    """

    def __init__(self, name: str = "ircclient") -> None:
        self.logger = logging.getLogger(name)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        human_text = human if human is not None else self._render(domain, action, kwargs)
        self.logger.log(
            level,
            self._build_message(event_name, human_text, kwargs),
            exc_info=exc_info,
        )

    @staticmethod
    def _render(domain: str, action: str, kwargs: dict[str, object]) -> str:
        template = EVENT_TEMPLATES.get((domain, action))
        if template:
            try:
                return template.format(**kwargs)
            except (KeyError, IndexError, ValueError):
                return template
        return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"

    @staticmethod
    def _build_message(
        event_name: str, human_text: str, kwargs: dict[str, object]
    ) -> str:
        user = kwargs.get("user")
        prefix = f"[{user}] " if isinstance(user, str) and user else ""
        if not is_debug_enabled():
            return f"{prefix}{human_text}"
        context = ", ".join(f"{k}={v}" for k, v in kwargs.items() if k != "user")
        width = 24
        ev = event_name.ljust(width) if len(event_name) <= width else event_name[: width - 1] + "…"
        base = f"{ev} {prefix}{human_text}"
        if context:
            base = f"{base} ({context})"
        return base


logger = ClientLogger()
