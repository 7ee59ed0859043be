"""
In-process message bus

Commands go to exactly one handler and return its result to the caller.
Domain events fan out to every subscriber once the transaction that
recorded them has committed; a failing subscriber is logged and skipped.
"""

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent
from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)

CommandHandler = Callable[[Any], Any]
EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    def __init__(self):
        self._subscribers: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)
        self._command_handlers: Dict[Type, CommandHandler] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe ``handler`` to ``event_type``; subscribing twice is a no-op."""
        subscribers = self._subscribers[event_type]
        if handler not in subscribers:
            subscribers.append(handler)

    def register_command_handler(self, command_type: Type, handler: CommandHandler):
        if command_type in self._command_handlers:
            raise ValueError(f"{command_type.__name__} already has a handler")
        self._command_handlers[command_type] = handler

    def has_command_handler(self, command_type: Type) -> bool:
        return command_type in self._command_handlers

    def handle_command(self, command: Any) -> Any:
        """
        Run the handler registered for ``type(command)``

        Domain errors are expected outcomes and are re-raised after an INFO
        line; anything else is logged at ERROR before it propagates.
        """
        name = type(command).__name__
        handler = self._command_handlers.get(type(command))
        if handler is None:
            raise ValueError(f"No handler registered for {name}")

        try:
            return handler(command)
        except DomainError as e:
            logger.info(f"{name} rejected: {e.code}: {e}")
            raise
        except Exception:
            logger.error(f"{name} failed", exc_info=True)
            raise

    def publish_events(self, events: Iterable[DomainEvent]):
        for event in events:
            for handler in self._subscribers.get(type(event), ()):
                try:
                    handler(event)
                except Exception:
                    logger.error(
                        f"Subscriber {getattr(handler, '__name__', handler)} failed on "
                        f"{type(event).__name__} {event.event_id}",
                        exc_info=True,
                    )


message_bus = MessageBus()
