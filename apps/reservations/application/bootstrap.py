"""Wires reservation handlers into the message bus."""

import logging

from shared.application.message_bus import MessageBus, message_bus
from apps.reservations.application import command_handlers as handlers
from apps.reservations.application.event_handlers import EVENT_HANDLERS

logger = logging.getLogger(__name__)


def bootstrap(bus: MessageBus = message_bus, clock=None, settings=None) -> MessageBus:
    """
    Register command and event handlers on ``bus``

    Safe to call more than once: already registered commands are left
    alone, so the first registration wins.
    """
    kwargs = {}
    if clock is not None:
        kwargs['clock'] = clock
    if settings is not None:
        kwargs['settings'] = settings

    command_handlers = {
        handlers.CreateHoldCommand: handlers.CreateHoldHandler,
        handlers.ConfirmReservationCommand: handlers.ConfirmReservationHandler,
        handlers.CancelReservationCommand: handlers.CancelReservationHandler,
        handlers.CancelByBookingCommand: handlers.CancelByBookingHandler,
        handlers.ExpireStaleHoldsCommand: handlers.ExpireStaleHoldsHandler,
        handlers.CheckAvailabilityQuery: handlers.CheckAvailabilityHandler,
        handlers.GetReservationQuery: handlers.GetReservationHandler,
    }
    for command_type, handler_class in command_handlers.items():
        if bus.has_command_handler(command_type):
            continue
        bus.register_command_handler(command_type, handler_class(**kwargs).handle)

    for event_type, event_handlers in EVENT_HANDLERS.items():
        for handler in event_handlers:
            bus.register_event_handler(event_type, handler)

    logger.debug("Reservation handlers registered")
    return bus
