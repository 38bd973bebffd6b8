"""Outbound email. Fire and forget: failures are logged, never raised."""

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction

logger = logging.getLogger(__name__)


def send_receipt(to: str, subject: str, body: str) -> None:
    if not to:
        return
    try:
        send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [to])
    except Exception:
        logger.exception("Failed to send receipt email to %s", to)
        return
    logger.info("Receipt email sent to %s", to)


def send_receipt_on_commit(to: str, subject: str, body: str) -> None:
    """Queue a receipt for after the current transaction commits."""
    transaction.on_commit(lambda: send_receipt(to, subject, body))
