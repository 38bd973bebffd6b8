from core.domain.codes import generate_code, random_suffix, slug_candidates
from core.domain.money import FeeSchedule, Money, PriceLine, PricedTotals, price
from core.domain.value_objects import EntityId

__all__ = [
    "EntityId",
    "Money",
    "FeeSchedule",
    "PriceLine",
    "PricedTotals",
    "price",
    "generate_code",
    "random_suffix",
    "slug_candidates",
]
