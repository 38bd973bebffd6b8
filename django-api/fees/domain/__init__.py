from fees.domain.models import (
    FeeAssignment,
    FeeDefinition,
    FeeDefinitionDraft,
    FeePayment,
    FeePaymentDraft,
    MemberBalance,
    MemberFeeLine,
    MemberFeeSummary,
    PaymentOutcome,
    derive_status,
)
from fees.domain.value_objects import FeeAssignmentId, FeeDefinitionId, FeePaymentId

__all__ = [
    "FeeAssignment",
    "FeeAssignmentId",
    "FeeDefinition",
    "FeeDefinitionDraft",
    "FeeDefinitionId",
    "FeePayment",
    "FeePaymentDraft",
    "FeePaymentId",
    "MemberBalance",
    "MemberFeeLine",
    "MemberFeeSummary",
    "PaymentOutcome",
    "derive_status",
]
