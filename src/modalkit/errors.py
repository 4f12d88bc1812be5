"""Exceptions raised by modalkit.

The controller's core operations (``show``/``close`` and the convenience
constructors) never raise; these cover the lookups layered on top.
"""

from __future__ import annotations

__all__ = ["ModalError", "ButtonNotFound"]


class ModalError(Exception):
    """Base class for modalkit errors."""


class ButtonNotFound(ModalError, LookupError):
    """Raised when activating a button the current dialog does not have."""

    def __init__(self, index: int, available: int) -> None:
        self.index = index
        self.available = available
        if available == 0:
            msg = f"no dialog button {index}: no dialog is visible"
        else:
            msg = f"no dialog button {index}: dialog has {available} button(s)"
        super().__init__(msg)
