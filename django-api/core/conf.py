"""Accessors for the ``LEDGER`` settings block.

Read at call time so tests can override settings per case.
"""

from django.conf import settings

from core.domain.codes import generate_code
from core.domain.money import FeeSchedule, Money


def ledger_setting(name: str):
    return settings.LEDGER[name]


def fee_schedule() -> FeeSchedule:
    return FeeSchedule(
        rate=ledger_setting("FEE_RATE"),
        fixed=Money(ledger_setting("FEE_FIXED_CENTS")),
    )


def new_code(seed: str) -> str:
    """A fresh public code with the configured suffix length."""
    return generate_code(seed, ledger_setting("CODE_SUFFIX_LENGTH"))
