r"""Configuration dataclass and defaults for pending HTTP results.

This module provides configuration constants and a dataclass-based
configuration object shared by ``HttpPendingResult`` and
``PendingClient``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_ERROR_TIMEOUT_MS",
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
    "ExecutorConfig",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from pendingresult.backoff import BaseBackoffStrategy, JitteredExponentialBackoff
from pendingresult.envelope import FieldNamingPolicy
from pendingresult.validation import validate_error_timeout

if TYPE_CHECKING:
    from collections.abc import Callable

    from pendingresult.callbacks import AttemptInfo, RetryInfo


# Default timeout in seconds for one HTTP exchange
DEFAULT_TIMEOUT = 10.0

# Default number of dispatcher worker threads
# Callback-mode retries sleep on a worker, so keep some headroom
DEFAULT_MAX_WORKERS = 10

# Default maximum cumulative backoff in milliseconds before retries stop
DEFAULT_ERROR_TIMEOUT_MS = 60_000

# HTTP status codes that trigger a retry
# 500: Internal Server Error
# 503: Service Unavailable
# 504: Gateway Timeout
RETRY_STATUS_CODES = (500, 503, 504)


@dataclass
class ExecutorConfig:
    """Configuration for the retry and decode behavior of a pending
    result.

    The configuration is shared between requests; the mutable retry
    state (retry counter, cumulative backoff) is never stored here.

    Args:
        error_timeout_ms: Maximum cumulative backoff time in milliseconds.
            Retries stop once the backoff slept so far reaches this value.
            Must be >= 0.
        naming_policy: Mapping from the JSON keys of the payload to the
            field names of the envelope.
        backoff: The backoff strategy used to compute retry delays.
        on_attempt: Optional callback called before each attempt.
        on_retry: Optional callback called before each backoff sleep.

    Example:
        ```pycon
        >>> from pendingresult.config import ExecutorConfig
        >>> config = ExecutorConfig()
        >>> config.error_timeout_ms
        60000
        >>> config.merge(error_timeout_ms=5_000).error_timeout_ms
        5000

        ```
    """

    error_timeout_ms: float = DEFAULT_ERROR_TIMEOUT_MS
    naming_policy: FieldNamingPolicy = FieldNamingPolicy.IDENTITY
    backoff: BaseBackoffStrategy = field(default_factory=JitteredExponentialBackoff)
    on_attempt: Callable[[AttemptInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None

    def __post_init__(self) -> None:
        validate_error_timeout(self.error_timeout_ms)

    def merge(self, **overrides: Any) -> ExecutorConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ExecutorConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
