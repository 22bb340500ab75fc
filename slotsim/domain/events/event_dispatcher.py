# slotsim/domain/events/event_dispatcher.py
import logging
from collections import defaultdict
from enum import Enum
from typing import Callable, Type

from .event_types import DomainEvent

Handler = Callable[[DomainEvent], None]


class EventDispatcher:
    """
    Dispatches domain events to registered handlers.

    A failing handler is logged and never interrupts the spin or turn that
    raised the event.
    """
    def __init__(self):
        """Initialize the event dispatcher."""
        self.logger = logging.getLogger("domain.events.dispatcher")
        self.handlers = defaultdict(list)  # event type -> handlers
        self.type_handlers = defaultdict(list)  # event class name -> handlers

    def register(self, event_type: Enum, handler: Handler):
        """
        Register a handler for a specific event type.

        Args:
            event_type: Member of any event-type enum
            handler: Function to call when the event occurs
        """
        self.handlers[event_type].append(handler)
        self.logger.debug(f"Registered handler for event type: {event_type.name}")

    def register_for_class(self, event_class: Type[DomainEvent], handler: Handler):
        """
        Register a handler for every event of a class, whatever its type.
        """
        self.type_handlers[event_class.__name__].append(handler)
        self.logger.debug(f"Registered handler for event class: {event_class.__name__}")

    def dispatch(self, event: DomainEvent):
        """
        Dispatch an event to all registered handlers: event-type handlers first, then class handlers.

        Args:
            event: Event to dispatch
        """
        all_handlers = self.handlers.get(event.type, []) + self.type_handlers.get(event.__class__.__name__, [])

        if not all_handlers:
            return

        self.logger.debug(f"Dispatching event {event} to {len(all_handlers)} handlers")

        for handler in all_handlers:
            try:
                handler(event)
            except Exception as e:
                self.logger.error(f"Error in event handler for {event.type.name}: {str(e)}")

    def unregister(self, event_type: Enum, handler: Handler) -> bool:
        """
        Unregister a handler for a specific event type.

        Returns:
            True if handler was removed, False if not found
        """
        if handler in self.handlers.get(event_type, []):
            self.handlers[event_type].remove(handler)
            self.logger.debug(f"Unregistered handler for event type: {event_type.name}")
            return True
        return False

    def unregister_for_class(self, event_class: Type[DomainEvent], handler: Handler) -> bool:
        """
        Unregister a handler for a specific event class.

        Returns:
            True if handler was removed, False if not found
        """
        class_name = event_class.__name__
        if handler in self.type_handlers.get(class_name, []):
            self.type_handlers[class_name].remove(handler)
            self.logger.debug(f"Unregistered handler for event class: {class_name}")
            return True
        return False
