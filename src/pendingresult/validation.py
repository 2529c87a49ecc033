r"""Parameter validation utilities for pending HTTP results.

This module provides validation functions for the executor and
dispatcher parameters to ensure they meet the required constraints
before being used.
"""

from __future__ import annotations

__all__ = ["validate_error_timeout", "validate_max_workers", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from pendingresult.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_error_timeout(error_timeout_ms: float) -> None:
    """Validate the error-timeout budget.

    Args:
        error_timeout_ms: Maximum cumulative backoff time in milliseconds
            before retries stop. Must be >= 0. A value of 0 disables
            retries.

    Raises:
        ValueError: If error_timeout_ms is negative.

    Example:
        ```pycon
        >>> from pendingresult.validation import validate_error_timeout
        >>> validate_error_timeout(60_000)
        >>> validate_error_timeout(0)

        ```
    """
    if error_timeout_ms < 0:
        msg = f"error_timeout_ms must be >= 0, got {error_timeout_ms}"
        raise ValueError(msg)


def validate_max_workers(max_workers: int) -> None:
    """Validate the size of the dispatcher thread pool.

    Args:
        max_workers: Number of dispatcher worker threads. Must be > 0.

    Raises:
        ValueError: If max_workers is not positive.
    """
    if max_workers <= 0:
        msg = f"max_workers must be > 0, got {max_workers}"
        raise ValueError(msg)
