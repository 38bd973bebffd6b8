"""Identifiers for the ticketing domain."""

from core.domain.value_objects import EntityId


class EventId(EntityId):
    """Unique identifier for a TicketEvent."""


class PerformanceId(EntityId):
    """Unique identifier for a Performance."""


class TicketTypeId(EntityId):
    """Unique identifier for a TicketType."""


class OrderId(EntityId):
    """Unique identifier for an Order."""


class SaleLinkId(EntityId):
    """Unique identifier for a StudentSaleLink."""
