"""Constant values shared by the controller, settings and web bridge.

Dialog archetypes are keyed by name (``success``, ``error``, ``info``,
``confirm``); the icons, default titles and button labels below are part of
the controller contract and are not user-configurable.
"""

from __future__ import annotations

from typing import Any, Dict

ICONS: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "info": "ℹ️",
    "confirm": "⚠️",
}

DEFAULT_TITLES: Dict[str, str] = {
    "success": "Success",
    "error": "Error",
    "info": "Info",
    "confirm": "Confirm",
}

BUTTON_TEXT: Dict[str, str] = {
    "ok": "OK",
    "confirm": "Yes",
    "cancel": "No",
}

# Web bridge defaults (overridable via settings.json, env and CLI)
WEB_DEFAULTS: Dict[str, Any] = {
    "host": "127.0.0.1",
    "port": 8080,
    # Seconds between WebSocket ping frames
    "ws_heartbeat_s": 30.0,
    # Pending snapshots kept per WebSocket client before dropping the oldest
    "ws_queue_size": 16,
}

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
