"""Records describing dialogs and their buttons.

``ButtonSpec``, ``ShowConfig`` and ``ConfirmOptions`` are caller-facing input
records validated by pydantic. ``PresentationState`` is the controller's own
immutable snapshot of what is on screen.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..settings.values import BUTTON_TEXT, DEFAULT_TITLES

__all__ = ["ButtonSpec", "ShowConfig", "ConfirmOptions", "PresentationState"]


class ButtonSpec(BaseModel):
    """One actionable dialog button.

    Parameters
    ----------
    text: Button label.
    action: Zero-argument callback run when the button is activated. It is
        an opaque handle owned by whoever built the dialog and is never
        serialized.
    primary: Visual emphasis hint.
    danger: Visual "destructive action" hint.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    action: Callable[[], Any]
    primary: bool = False
    danger: bool = False

    def display(self) -> Dict[str, Any]:
        """Return the render-relevant fields (everything but ``action``)."""
        return {"text": self.text, "primary": self.primary, "danger": self.danger}


class ShowConfig(BaseModel):
    """Partial configuration accepted by ``ModalController.show``.

    Every field is optional. A missing or empty value falls back to the
    controller default: empty strings for ``icon``/``title``/``message`` and a
    single primary ``OK`` button that closes the dialog for ``buttons``.
    Buttons may be passed as :class:`ButtonSpec` instances or as mappings
    with the same keys.
    """

    model_config = ConfigDict(frozen=True)

    icon: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    buttons: Optional[List[ButtonSpec]] = None


class ConfirmOptions(BaseModel):
    """Options for ``ModalController.confirm``.

    Both snake_case names and the camelCase aliases (``onConfirm``,
    ``onCancel``, ``confirmText``, ``cancelText``) are accepted.

    Parameters
    ----------
    on_confirm: Called after the dialog has closed when the confirm button
        is activated.
    on_cancel: Called after the dialog has closed when the cancel button is
        activated.
    title: Dialog title, ``"Confirm"`` by default.
    confirm_text: Confirm button label, ``"Yes"`` by default.
    cancel_text: Cancel button label, ``"No"`` by default.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    on_confirm: Optional[Callable[[], Any]] = Field(default=None, alias="onConfirm")
    on_cancel: Optional[Callable[[], Any]] = Field(default=None, alias="onCancel")
    title: str = Field(default=DEFAULT_TITLES["confirm"])
    confirm_text: str = Field(default=BUTTON_TEXT["confirm"], alias="confirmText")
    cancel_text: str = Field(default=BUTTON_TEXT["cancel"], alias="cancelText")


@dataclass(slots=True, frozen=True)
class PresentationState:
    """Visibility and content of the single dialog slot."""

    visible: bool = False
    icon: str = ""
    title: str = ""
    message: str = ""
    buttons: Tuple[ButtonSpec, ...] = ()

    @classmethod
    def hidden(cls) -> "PresentationState":
        """Return the canonical hidden state (no content, no buttons)."""
        return cls()

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view for renderers; button actions are left out."""
        return {
            "visible": self.visible,
            "icon": self.icon,
            "title": self.title,
            "message": self.message,
            "buttons": [
                {"index": i, **b.display()} for i, b in enumerate(self.buttons)
            ],
        }
