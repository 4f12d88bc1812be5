"""Browser-facing web bridge."""

from .bridge import ModalBridge, serve

__all__ = ["ModalBridge", "serve"]
