r"""JSON log output and a per-context correlation ID.

Attach ``StructuredFormatter`` to a handler of the ``pendingresult``
logger to get one JSON object per record. Records logged with
``extra={...}`` (the retry log line carries ``url``, ``status_code``,
``retry_count`` and ``cumulative_backoff_ms``) have those fields written as
top-level keys.

The correlation ID lives in a context variable. ``Dispatcher`` runs each
call in a copy of the caller's context, so records logged on a worker
while a request is retried or delivered keep the caller's ID.

Example:
    ```python
    import logging
    from pendingresult.structured_logging import StructuredFormatter, correlation_scope

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.getLogger("pendingresult").addHandler(handler)

    with correlation_scope("geocode-42"):
        pending.wait()
    ```
"""

from __future__ import annotations

__all__ = ["StructuredFormatter", "correlation_scope", "get_correlation_id"]

import contextlib
import contextvars
import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "pendingresult_correlation_id", default=None
)

# Attributes present on every LogRecord
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def get_correlation_id() -> str | None:
    """Return the correlation ID of the current context, if any."""
    return _correlation_id.get()


@contextlib.contextmanager
def correlation_scope(correlation_id: str | None) -> Iterator[str | None]:
    """Bind a correlation ID to the current context for the duration of
    the block.

    Pending results consumed inside the block, in either mode, log with
    this ID. The previous ID is restored on exit.

    Args:
        correlation_id: The ID to bind, or ``None`` to unset it.

    Example:
        ```pycon
        >>> from pendingresult.structured_logging import correlation_scope, get_correlation_id
        >>> with correlation_scope("req-7"):
        ...     get_correlation_id()
        ...
        'req-7'
        >>> get_correlation_id() is None
        True

        ```
    """
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """Formats each record as a single-line JSON object.

    Keys: ``timestamp`` (UTC, ISO 8601, milliseconds), ``level``,
    ``logger``, ``thread``, ``message``, then ``correlation_id`` and
    ``exception`` when present, then the extra fields of the record.
    Values that are not JSON serializable are written with ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        correlation_id = _correlation_id.get()
        if correlation_id is not None:
            payload["correlation_id"] = correlation_id
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS
        )
        return json.dumps(payload, default=str)
