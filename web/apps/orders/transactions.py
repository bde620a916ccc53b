"""Unit of work for the Order Engine: one database transaction, retried on
transient errors.

A transient error is a lost connection or a transaction the database
aborted on its own (serialization failure, deadlock). Django surfaces both
as ``OperationalError``/``InterfaceError``. Business errors (``ShopError``)
and everything else propagate on the first attempt.
"""

import logging
import time
from typing import Callable, TypeVar

from django.conf import settings
from django.db import InterfaceError, OperationalError, transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (OperationalError, InterfaceError)


def _retry_policy():
    """Return retry configuration as (max_retries, backoff_base, max_sleep)."""
    return (
        getattr(settings, "DB_RETRY_MAX", 3),
        getattr(settings, "DB_RETRY_BACKOFF_BASE", 0.05),
        getattr(settings, "DB_RETRY_MAX_SLEEP", 0.5),
    )


def run_in_transaction(fn: Callable[..., T], *args, **kwargs) -> T:
    """Run ``fn`` inside ``transaction.atomic`` and return its result.

    The whole call is rolled back when ``fn`` raises. On a transient
    database error it is retried from scratch up to ``DB_RETRY_MAX`` more
    times with capped exponential backoff.

    Raises:
        OperationalError | InterfaceError: When the retries are exhausted.
    """
    max_retries, backoff, cap = _retry_policy()
    tries = 0
    while True:
        try:
            with transaction.atomic():
                return fn(*args, **kwargs)
        except TRANSIENT_ERRORS as e:
            tries += 1
            if tries > max_retries:
                logger.error("transaction failed after retries", extra={"attempts": tries, "error": str(e)})
                raise
            sleep_s = min(backoff * (2 ** (tries - 1)), cap)
            logger.warning(
                "transient database error, retrying",
                extra={"attempt": tries, "sleep": sleep_s, "error": str(e)},
            )
            time.sleep(sleep_s)
