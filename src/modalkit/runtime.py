"""Runtime configuration and the process-wide modal controller.

``make_runtime_config`` merges persisted settings, the environment and
optional CLI overrides into a :class:`RuntimeConfig`. ``get_modal`` returns
the controller shared by the whole client, creating it on first access;
``set_modal`` installs a specific instance (tests and embedding applications
construct their own controllers and inject them here).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .modal.controller import ModalController
from .settings.schema import Settings
from .settings.store import SettingsStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RuntimeConfig:
    host: str
    port: int
    log_level: str
    ws_heartbeat_s: float
    ws_queue_size: int


def make_runtime_config(
    *, args: Optional[object] = None, settings: Optional[Settings] = None
) -> RuntimeConfig:
    """Build a RuntimeConfig.

    Precedence, lowest first: persisted settings (``SettingsStore.load()``
    unless *settings* is given), ``MODALKIT_WEB_PORT``, then CLI overrides
    from *args* (argparse.Namespace-like ``host``/``port``/``log_level``).
    """
    if settings is None:
        settings = SettingsStore.load()
    rc = RuntimeConfig(
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        ws_heartbeat_s=settings.ws_heartbeat_s,
        ws_queue_size=settings.ws_queue_size,
    )

    env_port = os.environ.get("MODALKIT_WEB_PORT")
    if env_port:
        try:
            rc.port = int(env_port)
        except ValueError:
            logger.warning("Invalid MODALKIT_WEB_PORT=%r", env_port)

    if args is not None:
        a_host = getattr(args, "host", None)
        if a_host is not None:
            rc.host = str(a_host)
        a_port = getattr(args, "port", None)
        if a_port is not None:
            rc.port = int(a_port)
        a_level = getattr(args, "log_level", None)
        if a_level is not None:
            rc.log_level = str(a_level).upper()

    return rc


# Process-wide controller ----------------------------------------------
_MODAL: ModalController | None = None


def get_modal() -> ModalController:
    """Return the shared controller, creating a hidden one if needed."""
    global _MODAL
    if _MODAL is None:
        _MODAL = ModalController()
    return _MODAL


def set_modal(modal: ModalController | None) -> None:
    """Install *modal* as the shared controller (``None`` resets it)."""
    global _MODAL
    _MODAL = modal
