"""Logging filters for enriching log records with request context.

Adding ``RequestIdFilter`` to a handler gives every record a
``request_id`` attribute, taken from the ContextVar set by the gateway
middleware, so log lines can be correlated per request.
"""

from logging import Filter, LogRecord

from .middleware import REQUEST_ID_CTX


class RequestIdFilter(Filter):
    """Attach a ``request_id`` attribute to log records.

    Outside a request the placeholder "-" is used so formatters can always
    reference ``%(request_id)s``.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True
