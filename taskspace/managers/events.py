"""
Event system for Taskspace.

Publishes the pending / fulfilled / rejected phase of every pipeline
operation so that a UI can drive loading indicators without polling.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from taskspace.models.results import RequestPhase

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Pipeline operations that publish lifecycle events."""
    FETCH_WORKSPACE = "space/getData"
    CREATE_SPACE = "space/createSpace"
    CREATE_FOLDER = "space/createFolder"
    CREATE_LIST = "space/createList"
    CREATE_TASK = "space/createTask"


@dataclass
class Event:
    """Base event class."""
    type: EventType
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class OperationEvent(Event):
    """One lifecycle phase of a pipeline operation."""
    phase: RequestPhase = RequestPhase.PENDING
    payload: Any = None
    error: Optional[str] = None


class EventListener(ABC):
    """Base class for event listeners."""

    @abstractmethod
    def handle(self, event: Event) -> None:
        """Handle an event.

        Args:
            event: The event to handle.
        """
        pass

    @property
    @abstractmethod
    def subscribed_events(self) -> List[EventType]:
        """Return list of event types this listener subscribes to."""
        pass


class CallbackListener(EventListener):
    """Adapts a plain callable to the listener interface."""

    def __init__(self, callback: Callable[[Event], None], events: Optional[List[EventType]] = None) -> None:
        self.callback = callback
        self._events = list(events) if events else list(EventType)

    def handle(self, event: Event) -> None:
        self.callback(event)

    @property
    def subscribed_events(self) -> List[EventType]:
        return self._events


class EventBus:
    """
    Event bus for publishing and subscribing to operation events.

    Each pipeline owns its bus, so separate stores never see each other's events.
    """

    def __init__(self) -> None:
        self._listeners: Dict[EventType, List[EventListener]] = {}

    def subscribe(self, listener: Union[EventListener, Callable[[Event], None]]) -> EventListener:
        """Subscribe a listener to events.

        Args:
            listener: Listener instance, or a callable receiving every event.

        Returns:
            The subscribed listener (use it to unsubscribe a callable).
        """
        if not isinstance(listener, EventListener):
            listener = CallbackListener(listener)
        for event_type in listener.subscribed_events:
            if event_type not in self._listeners:
                self._listeners[event_type] = []
            self._listeners[event_type].append(listener)
        return listener

    def unsubscribe(self, listener: EventListener) -> None:
        """Unsubscribe a listener from all events.

        Args:
            listener: The listener to unsubscribe.
        """
        for event_type in self._listeners:
            if listener in self._listeners[event_type]:
                self._listeners[event_type].remove(listener)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed listeners.

        A failing listener is logged and does not stop the others.

        Args:
            event: The event to publish.
        """
        listeners = list(self._listeners.get(event.type, []))
        for listener in listeners:
            try:
                listener.handle(event)
            except Exception:
                logger.exception(
                    "Listener %s failed on %s", listener.__class__.__name__, event.type.value
                )

    def clear(self) -> None:
        """Clear all listeners (useful for testing)."""
        self._listeners.clear()
