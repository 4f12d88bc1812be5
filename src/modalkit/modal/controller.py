"""Single-slot modal dialog controller.

:class:`ModalController` is the only writer of the dialog presentation
state. At most one dialog is shown at a time: ``show`` (and the
``success``/``error``/``info``/``confirm`` shortcuts built on it) replaces
whatever is on screen, ``close`` returns to the hidden state.

The state lives in a :class:`~modalkit.core.cells.StateCell` holding an
immutable :class:`PresentationState`, so each operation is a single write and
observers only ever see complete states. Renderers read ``state`` (or
subscribe to it) and call :meth:`ModalController.activate` when a button is
clicked.

Usage example::

    modal = ModalController()
    modal.confirm(
        "Delete the profile?",
        on_confirm=lambda: modal.success("Profile deleted"),
    )
    modal.activate(0)   # closes, then runs on_confirm
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from ..core.cells import StateCell
from ..errors import ButtonNotFound
from ..settings.values import BUTTON_TEXT, DEFAULT_TITLES, ICONS
from .models import ButtonSpec, ConfirmOptions, PresentationState, ShowConfig

__all__ = ["ModalController"]

logger = logging.getLogger(__name__)


class ModalController:
    """Owns the single dialog slot.

    Parameters
    ----------
    cell: Optional state cell to store the presentation state in. A fresh
        cell holding the hidden state is created when omitted; pass one to
        share the state with an existing reactive store.
    """

    def __init__(self, cell: Optional[StateCell[PresentationState]] = None) -> None:
        self._cell: StateCell[PresentationState] = (
            cell if cell is not None else StateCell(PresentationState.hidden())
        )

    # Read access ---------------------------------------------------------
    @property
    def state(self) -> PresentationState:
        return self._cell.get()

    @property
    def visible(self) -> bool:
        return self._cell.get().visible

    @property
    def icon(self) -> str:
        return self._cell.get().icon

    @property
    def title(self) -> str:
        return self._cell.get().title

    @property
    def message(self) -> str:
        return self._cell.get().message

    @property
    def buttons(self) -> Tuple[ButtonSpec, ...]:
        return self._cell.get().buttons

    def subscribe(
        self, listener: Callable[[PresentationState], None]
    ) -> Callable[[], None]:
        """Call *listener* with every new state; returns an unsubscribe callable."""
        return self._cell.subscribe(listener)

    # Core operations -----------------------------------------------------
    def show(
        self,
        config: Union[ShowConfig, Mapping[str, Any], None] = None,
        **fields: Any,
    ) -> None:
        """Display a dialog, replacing any dialog currently shown.

        *config* and keyword *fields* (``icon``, ``title``, ``message``,
        ``buttons``) are merged, keywords winning. Missing or empty values
        take the defaults described on :class:`ShowConfig`.
        """
        cfg = _coerce(ShowConfig, config, fields)
        buttons = tuple(cfg.buttons) if cfg.buttons else (self._ok_button(),)
        state = PresentationState(
            visible=True,
            icon=cfg.icon or "",
            title=cfg.title or "",
            message=cfg.message or "",
            buttons=buttons,
        )
        logger.debug("modal show title=%r buttons=%d", state.title, len(buttons))
        self._cell.set(state)

    def close(self) -> None:
        """Hide the dialog and drop its content. Safe to call when hidden."""
        logger.debug("modal close")
        self._cell.set(PresentationState.hidden())

    # Convenience constructors -------------------------------------------
    def success(self, message: str, title: str = DEFAULT_TITLES["success"]) -> None:
        self._notice("success", message, title)

    def error(self, message: str, title: str = DEFAULT_TITLES["error"]) -> None:
        self._notice("error", message, title)

    def info(self, message: str, title: str = DEFAULT_TITLES["info"]) -> None:
        self._notice("info", message, title)

    def confirm(
        self,
        message: str,
        options: Union[ConfirmOptions, Mapping[str, Any], None] = None,
        **kwargs: Any,
    ) -> None:
        """Ask a yes/no question.

        Shows a warning dialog with a confirm button (primary, danger) and a
        cancel button, in that order. Either button first closes the dialog
        and then calls ``on_confirm``/``on_cancel`` when one was given, so the
        callback observes a hidden dialog and is free to show a new one.
        """
        opts = _coerce(ConfirmOptions, options, kwargs)

        def _on_confirm() -> None:
            self.close()
            if opts.on_confirm is not None:
                opts.on_confirm()

        def _on_cancel() -> None:
            self.close()
            if opts.on_cancel is not None:
                opts.on_cancel()

        self.show(
            icon=ICONS["confirm"],
            title=opts.title,
            message=message,
            buttons=[
                ButtonSpec(
                    text=opts.confirm_text,
                    action=_on_confirm,
                    primary=True,
                    danger=True,
                ),
                ButtonSpec(text=opts.cancel_text, action=_on_cancel),
            ],
        )

    # Rendering-layer entry point ----------------------------------------
    def activate(self, index: int) -> Any:
        """Run the action of button *index* of the dialog currently shown.

        Exceptions raised by the action propagate unchanged.
        """
        buttons = self._cell.get().buttons
        if not 0 <= index < len(buttons):
            raise ButtonNotFound(index, len(buttons))
        button = buttons[index]
        logger.debug("modal activate index=%d text=%r", index, button.text)
        return button.action()

    # Internals -----------------------------------------------------------
    def _ok_button(self) -> ButtonSpec:
        return ButtonSpec(text=BUTTON_TEXT["ok"], action=self.close, primary=True)

    def _notice(self, kind: str, message: str, title: str) -> None:
        self.show(
            icon=ICONS[kind],
            title=title,
            message=message,
            buttons=[self._ok_button()],
        )


def _coerce(model: Any, base: Any, overrides: Mapping[str, Any]) -> Any:
    """Build a *model* instance from an instance/mapping plus keyword overrides."""
    if base is None:
        return model(**overrides)
    if isinstance(base, model) and not overrides:
        return base
    # Iterating a pydantic model yields (field_name, value) pairs
    data = dict(base)
    data.update(overrides)
    return model(**data)
