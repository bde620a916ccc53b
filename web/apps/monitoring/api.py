import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


def _db_ok() -> bool:
    try:
        with connection.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()
    except DatabaseError as e:
        logger.warning("health check: database unreachable", extra={"error": str(e)})
        return False
    return True


@require_GET
def health_view(_request):
    """Liveness/readiness probe: 200 when every component answers, 503 otherwise."""
    db_ok = _db_ok()
    ok = db_ok
    return JsonResponse(
        {"ok": ok, "components": {"db": {"ok": db_ok}}},
        status=200 if ok else 503,
    )
