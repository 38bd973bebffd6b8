"""Identifiers for the fees domain."""

from core.domain.value_objects import EntityId


class FeeDefinitionId(EntityId):
    """Unique identifier for a FeeDefinition."""


class FeeAssignmentId(EntityId):
    """Unique identifier for a FeeAssignment."""


class FeePaymentId(EntityId):
    """Unique identifier for a FeePayment."""
