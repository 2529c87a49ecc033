r"""Observability hooks for the attempt and retry lifecycle.

Two hooks can be set on ``ExecutorConfig``:

- on_attempt: Called before each attempt is handed to the dispatcher
- on_retry: Called before each backoff sleep

Hooks run on the thread driving the request: the caller thread for
``wait()``, a dispatcher worker for ``set_callback()``.

Example:
    ```pycon
    >>> from pendingresult.callbacks import RetryInfo
    >>> from pendingresult.config import ExecutorConfig
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"Retry #{info.retry_count} in {info.wait_time:.2f}s")
    ...
    >>> config = ExecutorConfig(on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = ["AttemptInfo", "RetryInfo", "invoke_on_attempt", "invoke_on_retry"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class AttemptInfo:
    """Information passed to on_attempt callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt number (1-indexed). First attempt is 1.
    """

    url: str
    method: str
    attempt: int


@dataclass
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        retry_count: The retry about to happen (1-indexed).
        wait_time: The sleep time in seconds before this retry.
        status_code: The HTTP status code that triggered the retry.
        cumulative_backoff_ms: Backoff slept before this retry, in milliseconds.
    """

    url: str
    method: str
    retry_count: int
    wait_time: float
    status_code: int
    cumulative_backoff_ms: float


def invoke_on_attempt(
    on_attempt: Callable[[AttemptInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
) -> None:
    """Invoke on_attempt callback if provided.

    Args:
        on_attempt: Optional callback to invoke before each attempt.
        url: The URL being requested.
        method: The HTTP method.
        attempt: The attempt number (0-indexed internally). The callback
            receives this as a 1-indexed value (attempt + 1).
    """
    if on_attempt is not None:
        on_attempt(AttemptInfo(url=url, method=method, attempt=attempt + 1))


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    url: str,
    method: str,
    retry_count: int,
    sleep_time: float,
    status_code: int,
    cumulative_backoff_ms: float,
) -> None:
    """Invoke on_retry callback if provided."""
    if on_retry is not None:
        on_retry(
            RetryInfo(
                url=url,
                method=method,
                retry_count=retry_count,
                wait_time=sleep_time,
                status_code=status_code,
                cumulative_backoff_ms=cumulative_backoff_ms,
            )
        )
