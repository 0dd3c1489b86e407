"""
Core engine module.

Exports:
- Component: Validated, cloneable data container base
- EventBus, Event: Event system
"""

from engine.core.component import Component
from engine.core.events import EventBus, Event, EventHandler

__all__ = [
    "Component",
    "EventBus",
    "Event",
    "EventHandler",
]
