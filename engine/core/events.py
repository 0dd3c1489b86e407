"""
Typed event bus for decoupled communication.

Event types are Enum members, so publishers and listeners agree on
names without magic strings. Dispatch is synchronous and ordered:
handlers run in priority order inside ``publish``, and anything
published from inside a handler is queued until the current dispatch
finishes.

Usage:
    class BattleEvent(Enum):
        ATTACK_PERFORMED = auto()

    bus.subscribe(BattleEvent.ATTACK_PERFORMED, on_attack)
    bus.publish(BattleEvent.ATTACK_PERFORMED, attacker=a, defender=b, damage=12)
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Event payload, passed to ``publish`` as keyword arguments
        consumed: Set by a handler to stop lower-priority handlers
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Stop propagation to the remaining handlers."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


@dataclass(eq=False)
class _Subscription:
    priority: int
    target: Any
    one_shot: bool = False

    def resolve(self) -> EventHandler | None:
        """Return the live handler, or None if a weak target was collected."""
        if isinstance(self.target, (ref, WeakMethod)):
            return self.target()
        return self.target


class EventBus:
    """
    Publish/subscribe hub.

    - Enum-typed events
    - Priority ordering (higher first, ties keep subscription order)
    - Optional weak references, so bound methods of dead listeners drop out
    - One-shot handlers
    - Consumption stops propagation
    """

    def __init__(self):
        self._subscriptions: dict[Enum, list[_Subscription]] = {}
        self._pending: deque[Event] = deque()
        self._dispatching = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Register a handler for one event type.

        Args:
            event_type: The event type to listen for
            handler: Callback taking the Event
            priority: Higher priority handlers are called first
            one_shot: Remove the handler after its first call
            weak: Hold the handler weakly (bound methods via WeakMethod)
        """
        if weak:
            target = WeakMethod(handler) if hasattr(handler, '__func__') else ref(handler)
        else:
            target = handler

        subs = self._subscriptions.setdefault(event_type, [])
        index = len(subs)
        for i, existing in enumerate(subs):
            if priority > existing.priority:
                index = i
                break
        subs.insert(index, _Subscription(priority, target, one_shot))

    def subscribe_many(
        self,
        event_types: Iterable[Enum],
        handler: EventHandler,
        priority: int = 0,
        weak: bool = True,
    ) -> None:
        """Register one handler for several event types (e.g. a whole Enum)."""
        for event_type in event_types:
            self.subscribe(event_type, handler, priority=priority, weak=weak)

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        subs = self._subscriptions.get(event_type)
        if not subs:
            return
        self._subscriptions[event_type] = [s for s in subs if s.resolve() != handler]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event payload

        Returns:
            The Event (check ``consumed`` to see whether a handler claimed it)
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        """Publish a pre-built event."""
        if self._dispatching:
            self._pending.append(event)
            return

        self._dispatch(event)
        while self._pending:
            self._dispatch(self._pending.popleft())

    def clear(self, event_type: Enum | None = None) -> None:
        """Drop handlers for one event type, or all of them."""
        if event_type is None:
            self._subscriptions.clear()
        else:
            self._subscriptions.pop(event_type, None)

    def handler_count(self, event_type: Enum) -> int:
        return sum(1 for s in self._subscriptions.get(event_type, []) if s.resolve() is not None)

    def _dispatch(self, event: Event) -> None:
        subs = self._subscriptions.get(event.type)
        if not subs:
            return

        self._dispatching = True
        finished: list[_Subscription] = []
        try:
            for sub in list(subs):
                handler = sub.resolve()
                if handler is None:
                    finished.append(sub)
                    continue

                try:
                    handler(event)
                except Exception:
                    logger.exception(f"Error in event handler for {event.type}")

                if sub.one_shot:
                    finished.append(sub)
                if event.consumed:
                    break
        finally:
            self._dispatching = False

        if finished:
            current = self._subscriptions.get(event.type, [])
            self._subscriptions[event.type] = [s for s in current if s not in finished]
