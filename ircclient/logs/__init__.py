"""Project logging package.

Contains the structured event logger and its template catalog.
"""

from .event_catalog import EVENT_TEMPLATES, reload_event_templates  # noqa: F401
from .logger import ClientLogger, logger  # noqa: F401

__all__ = ["ClientLogger", "logger", "EVENT_TEMPLATES", "reload_event_templates"]
