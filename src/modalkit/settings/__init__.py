"""Settings schema, constant values and JSON persistence."""

from .schema import Settings
from .store import SettingsStore

__all__ = ["Settings", "SettingsStore"]
