"""Reactive state substrate and event fan-out."""

from .cells import StateCell
from .events import EventBus, Subscription, pack, unpack

__all__ = ["StateCell", "EventBus", "Subscription", "pack", "unpack"]
