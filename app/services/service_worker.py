"""Render the browser-side push receiver script."""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from string import Template

from app.config import Settings, settings

TEMPLATE_PATH = Path(__file__).resolve().parent.parent / "static" / "sw.js.tmpl"


@lru_cache()
def _load_template() -> Template:
    return Template(TEMPLATE_PATH.read_text(encoding="utf-8"))


def render_service_worker(config: Settings = settings) -> str:
    """Return the service worker source with configuration values inlined.

    Values are JSON-encoded so they land in the script as JS literals.
    """

    values = {
        "version": config.SW_VERSION,
        "app_scope": config.SW_APP_SCOPE,
        "default_title": config.SW_DEFAULT_TITLE,
        "default_body": config.SW_DEFAULT_BODY,
        "default_icon": config.PUSH_ICON_PATH,
        "default_badge": config.PUSH_BADGE_PATH,
        "purge_caches": config.SW_PURGE_CACHES,
        "cache_bust": config.SW_CACHE_BUST,
        "sync_url": config.SW_SYNC_URL,
    }
    return _load_template().substitute({key: json.dumps(value) for key, value in values.items()})
