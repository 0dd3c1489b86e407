"""
Engine - generic infrastructure shared by the game packages.

Quick Start:
    from engine.core import EventBus

    bus = EventBus()
    bus.subscribe(MyEvents.SOMETHING, handler)
    bus.publish(MyEvents.SOMETHING, value=1)
"""

__version__ = "0.1.0"

from engine.core import (
    Component,
    EventBus,
    Event,
)
from engine.resources import Database

__all__ = [
    # Data
    "Component",
    "Database",
    # Events
    "EventBus",
    "Event",
]
