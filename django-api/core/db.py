"""Datastore primitives used by every store implementation.

- ``unit_of_work``: one all-or-nothing transaction per operation.
- ``insert_or_ignore``: ``INSERT ... ON CONFLICT DO NOTHING`` that reports
  which rows actually landed.
- ``insert_with_fresh_codes``: insert rows carrying a generated unique code,
  regenerating codes for the rows that collided.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Sequence, TypeVar

from django.db import DatabaseError, models, transaction
from django.db.models.signals import post_save

from core.conf import ledger_setting
from core.domain.errors import CodeExhaustedError, TransactionFailedError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=models.Model)


@contextmanager
def unit_of_work(operation: str) -> Iterator[None]:
    """Run the block in a single transaction.

    Domain errors roll back and propagate unchanged. Datastore errors roll
    back and surface as ``TransactionFailedError``.
    """
    try:
        with transaction.atomic():
            yield
    except DatabaseError as exc:
        logger.exception("%s rolled back after datastore error", operation)
        raise TransactionFailedError(operation) from exc


def insert_or_ignore(instances: Sequence[M]) -> list[M]:
    """Insert rows, skipping any that violate a unique constraint.

    Primary keys are generated client side (UUIDs), so a row landed exactly
    when its primary key is visible afterwards. ``post_save`` is sent for the
    landed rows so receivers behave as they do for ``save()``.

    On SQLite the insert compiles to ``INSERT OR IGNORE``, which also drops
    rows failing CHECK or NOT NULL constraints. Callers must not read a
    missing row as a unique collision unless a unique key can explain it.
    """
    if not instances:
        return []
    model = type(instances[0])
    manager = model._default_manager
    manager.bulk_create(instances, ignore_conflicts=True)
    landed_pks = set(
        manager.filter(pk__in=[instance.pk for instance in instances]).values_list("pk", flat=True)
    )
    landed = [instance for instance in instances if instance.pk in landed_pks]
    for instance in landed:
        instance._state.adding = False
        instance._state.db = manager.db
        post_save.send(
            sender=model,
            instance=instance,
            created=True,
            update_fields=None,
            raw=False,
            using=manager.db,
        )
    return landed


def insert_with_fresh_codes(
    build: Callable[[], M],
    count: int,
    kind: str,
    attempts: int | None = None,
) -> list[M]:
    """Insert ``count`` rows built by ``build``, each with a fresh unique code.

    ``build`` must generate a new random code on every call. Rows whose code
    collided are rebuilt and retried up to ``attempts`` rounds.
    """
    attempts = attempts or ledger_setting("CODE_RETRY_ATTEMPTS")
    inserted: list[M] = []
    for attempt in range(1, attempts + 1):
        batch = [build() for _ in range(count - len(inserted))]
        inserted.extend(insert_or_ignore(batch))
        if len(inserted) == count:
            return inserted
        logger.warning(
            "%d %s collision(s) on attempt %d of %d",
            count - len(inserted),
            kind,
            attempt,
            attempts,
        )
    raise CodeExhaustedError(kind, attempts)


def insert_keyed_with_fresh_code(
    build: Callable[[], M],
    key_exists: Callable[[], bool],
    kind: str,
    attempts: int | None = None,
) -> M | None:
    """Insert one row with a fresh code unless its natural key is already taken.

    An ignored insert is either a code collision (retried with a new code) or
    a row for the same natural key written by someone else (skipped, returns
    None).
    """
    attempts = attempts or ledger_setting("CODE_RETRY_ATTEMPTS")
    for attempt in range(1, attempts + 1):
        landed = insert_or_ignore([build()])
        if landed:
            return landed[0]
        if key_exists():
            return None
        logger.warning("%s collision on attempt %d of %d", kind, attempt, attempts)
    raise CodeExhaustedError(kind, attempts)
