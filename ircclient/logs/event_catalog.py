"""Event template catalog loader (single authoritative JSON)."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

EVENT_TEMPLATES: dict[tuple[str, str], str] = {}
_JSON_FILENAME = "event_templates.json"  # co-located inside logs/


def _load_event_templates(path: Path | None = None) -> dict[tuple[str, str], str]:
    """Flatten ``{domain: {action: template}}`` into ``{(domain, action): template}``.

    A missing or unreadable file yields a single ``("app", "load_error")``
    entry so that logging itself never fails.
    """
    path = path or Path(__file__).with_name(_JSON_FILENAME)
    templates: dict[tuple[str, str], str] = {}
    try:
        with path.open("r", encoding="utf-8") as f:
            raw: Any = json.load(f)
    except FileNotFoundError:
        templates[("app", "load_error")] = "Event templates file missing"
        return templates
    except (OSError, ValueError) as e:
        templates[("app", "load_error")] = f"Failed to load event templates: {e}"[:200]
        return templates
    if isinstance(raw, Mapping):
        for domain, actions in raw.items():
            if not (isinstance(domain, str) and isinstance(actions, Mapping)):
                continue
            for action, template in actions.items():
                if isinstance(action, str) and isinstance(template, str):
                    templates[(domain, action)] = template
    return templates


def reload_event_templates(path: Path | None = None) -> None:
    # Mutate in place so modules holding a reference see the new catalog.
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(_load_event_templates(path))


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "reload_event_templates"]
