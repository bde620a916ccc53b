"""Idempotency utilities for safely handling duplicate order submissions.

Keys are scoped to the calling account. The first request with a key
creates a record; once it finishes, its response is stored so retries can
short-circuit. Reusing a key with a different payload, or while the first
request is still running, is a conflict. A record left unfinished for
longer than ``settings.IDEMPOTENCY_STALE_SECONDS`` (its worker died) is
taken over by the next request with the same payload.
"""

import hashlib
import json
import logging
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.utils.encoders import JSONEncoder

from apps.common.errors import Conflict

from .models import IdempotencyKey

logger = logging.getLogger(__name__)

IN_PROGRESS = 0


def _hash(payload) -> str:
    """Compute a stable SHA-256 hash for a JSON-serializable payload.

    The payload is serialized with sorted keys and compact separators to
    ensure a deterministic representation before hashing.
    """
    body = json.dumps(payload, sort_keys=True, separators=(",", ":"), cls=JSONEncoder)
    return hashlib.sha256(body.encode("utf-8")).hexdigest()


def _jsonable(body: dict) -> dict:
    # stored exactly as the JSON renderer would emit it, so replays match
    return json.loads(json.dumps(body, cls=JSONEncoder))


@transaction.atomic
def get_or_create_idempotent(account_id: int, key: str, payload) -> tuple[bool, IdempotencyKey]:
    """Get-or-create an idempotency record for ``(account_id, key)``.

    The create path runs in a nested savepoint so an IntegrityError (a
    concurrent request won the insert) only rolls back that block. The
    existing-record path locks the row (SELECT ... FOR UPDATE).

    Args:
        account_id: Account the key belongs to.
        key: Client-provided idempotency key.
        payload: Request payload used to compute the request hash.

    Returns:
        tuple[bool, IdempotencyKey]: ``(existing, rec)``; ``existing`` is
        True when a finished record with the same payload was found.
        A stale unfinished record is handed back with ``existing`` False.

    Raises:
        Conflict: ``IDEMPOTENCY_CONFLICT`` when the key was used with a
            different payload, ``IDEMPOTENCY_IN_PROGRESS`` when the first
            request has not finished yet.
    """
    h = _hash(payload)

    try:
        with transaction.atomic():
            rec = IdempotencyKey.objects.create(
                account_id=account_id, key=key, request_hash=h, response_status=IN_PROGRESS, response_body={}
            )
            return False, rec
    except IntegrityError:
        rec = IdempotencyKey.objects.select_for_update().get(account_id=account_id, key=key)
        if rec.request_hash != h:
            raise Conflict(
                "Idempotency-Key was already used with a different payload", code="IDEMPOTENCY_CONFLICT"
            )
        if rec.response_status == IN_PROGRESS:
            if _is_stale(rec):
                rec.created_at = timezone.now()
                rec.save(update_fields=["created_at"])
                logger.warning("stale idempotency key taken over", extra={"key": key})
                return False, rec
            raise Conflict(
                "A request with this Idempotency-Key is still being processed", code="IDEMPOTENCY_IN_PROGRESS"
            )
        return True, rec


def _is_stale(rec: IdempotencyKey) -> bool:
    return timezone.now() - rec.created_at > timedelta(seconds=settings.IDEMPOTENCY_STALE_SECONDS)


def finalize(rec: IdempotencyKey, status_code: int, body: dict, order_id=None) -> None:
    """Persist the final response for an idempotent request.

    Args:
        rec: The idempotency record to update.
        status_code: HTTP status code to store for the response.
        body: Response body to persist.
        order_id: Optional order to link to the record.
    """
    rec.response_status = status_code
    rec.response_body = _jsonable(body)
    if order_id is not None:
        rec.order_id = order_id
    rec.save(update_fields=["response_status", "response_body", "order"])


def release(rec: IdempotencyKey) -> None:
    """Forget a key whose request failed unexpectedly so the client can retry it."""
    rec.delete()
