"""Donor list filtering as a typed predicate list.

``DonorFilter`` is validated on construction and turned into a list of
``Predicate`` values. Stores translate each predicate into a query clause;
no query text is assembled from request input.
"""

import json
from dataclasses import dataclass
from datetime import datetime

from fundraising.domain.errors import InvalidChoiceError

MAX_LIMIT = 200

SEARCH_FIELDS = ("first_name", "last_name", "organization_name", "email")

# Sort key -> ordering, most significant first.
SORT_ORDERINGS = {
    "last_donation": ("-last_donation_at", "last_name"),
    "lifetime": ("-lifetime_total_cents", "last_name"),
    "ytd": ("-ytd_total_cents", "last_name"),
    "name": ("last_name", "first_name", "organization_name"),
    "created": ("-created_at",),
}


@dataclass(frozen=True)
class Predicate:
    """``fields`` are OR-ed together, each with the same lookup and value."""

    fields: tuple[str, ...]
    lookup: str
    value: object


@dataclass(frozen=True)
class DonorFilter:
    search: str = ""
    tags: tuple[str, ...] = ()
    min_lifetime_cents: int | None = None
    max_lifetime_cents: int | None = None
    last_donation_after: datetime | None = None
    last_donation_before: datetime | None = None
    sort: str = "last_donation"
    limit: int = 50
    offset: int = 0

    def __post_init__(self) -> None:
        if self.sort not in SORT_ORDERINGS:
            raise InvalidChoiceError("sort", f"Unknown sort '{self.sort}'")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise InvalidChoiceError("limit", f"limit must be between 1 and {MAX_LIMIT}")
        if self.offset < 0:
            raise InvalidChoiceError("offset", "offset cannot be negative")
        for name in ("min_lifetime_cents", "max_lifetime_cents"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise InvalidChoiceError(name, f"{name} cannot be negative")

    def predicates(self) -> list[Predicate]:
        predicates: list[Predicate] = []
        if self.search.strip():
            predicates.append(Predicate(SEARCH_FIELDS, "icontains", self.search.strip()))
        # Tags are stored as a JSON list; match the quoted element so "vip"
        # does not match "vip-emeritus".
        for tag in self.tags:
            predicates.append(Predicate(("tags",), "icontains", json.dumps(tag)))
        if self.min_lifetime_cents is not None:
            predicates.append(Predicate(("lifetime_total_cents",), "gte", self.min_lifetime_cents))
        if self.max_lifetime_cents is not None:
            predicates.append(Predicate(("lifetime_total_cents",), "lte", self.max_lifetime_cents))
        if self.last_donation_after is not None:
            predicates.append(Predicate(("last_donation_at",), "gte", self.last_donation_after))
        if self.last_donation_before is not None:
            predicates.append(Predicate(("last_donation_at",), "lte", self.last_donation_before))
        return predicates

    @property
    def ordering(self) -> tuple[str, ...]:
        return SORT_ORDERINGS[self.sort]
