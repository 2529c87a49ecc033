r"""pendingresult - Pending HTTP results with retry and typed decoding.

This package issues one logical HTTP request through a shared, bounded
dispatcher, retries it with jittered exponential backoff when the server
answers 500, 503 or 504, and decodes the final response body into a typed
result or a typed error. Results can be consumed with a callback or with a
blocking wait.

Key Features:
    - Callback mode (``set_callback``) and blocking mode (``wait``) on the
      same dispatcher
    - Retry on 500, 503 and 504 within a cumulative backoff budget
    - Backoff of 0.5s * 1.5^(n-1) scaled by a random factor in [0.5, 1.5)
    - Typed envelopes (pydantic) separating results from API-level errors
    - Field naming policies for camelCase, PascalCase and kebab-case payloads
    - Distinct errors for transport, HTTP, decoding and API failures

Example:
    ```pycon
    >>> from pendingresult import PendingClient
    >>> with PendingClient() as client:  # doctest: +SKIP
    ...     pending = client.get("https://api.example.com/elevation", ElevationEnvelope)
    ...     elevations = pending.wait()
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "ApiEnvelope",
    "ApplicationError",
    "DecodeError",
    "Dispatcher",
    "ExecutorConfig",
    "FieldNamingPolicy",
    "HttpError",
    "HttpPendingResult",
    "PendingClient",
    "PendingResult",
    "PendingResultError",
    "RETRY_STATUS_CODES",
    "Request",
    "StatusEnvelope",
    "TransportError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from pendingresult.client import PendingClient
from pendingresult.config import RETRY_STATUS_CODES, ExecutorConfig
from pendingresult.dispatch import Dispatcher
from pendingresult.envelope import ApiEnvelope, FieldNamingPolicy, StatusEnvelope
from pendingresult.exceptions import (
    ApplicationError,
    DecodeError,
    HttpError,
    PendingResultError,
    TransportError,
)
from pendingresult.pending import HttpPendingResult, PendingResult
from pendingresult.request import Request

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
