"""Modal dialog controller and its records."""

from .controller import ModalController
from .models import ButtonSpec, ConfirmOptions, PresentationState, ShowConfig

__all__ = [
    "ModalController",
    "ButtonSpec",
    "ConfirmOptions",
    "PresentationState",
    "ShowConfig",
]
