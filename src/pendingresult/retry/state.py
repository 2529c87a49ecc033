r"""Mutable retry state of one logical request."""

from __future__ import annotations

__all__ = ["RetryState"]

from dataclasses import dataclass


@dataclass
class RetryState:
    """Retry counter and cumulative backoff of one logical request.

    A state is owned by exactly one pending result and only mutated by the
    thread currently driving its attempt/retry sequence.

    Attributes:
        error_timeout_ms: Maximum cumulative backoff in milliseconds.
        retry_count: Number of retries performed so far.
        cumulative_backoff_ms: Backoff slept so far, in milliseconds.

    Example:
        ```pycon
        >>> from pendingresult.retry import RetryState
        >>> state = RetryState(error_timeout_ms=1000)
        >>> state.record_retry(0.6)
        >>> state.retry_count, state.cumulative_backoff_ms
        (1, 600.0)
        >>> state.budget_exhausted
        False

        ```
    """

    error_timeout_ms: float
    retry_count: int = 0
    cumulative_backoff_ms: float = 0.0

    @property
    def budget_exhausted(self) -> bool:
        """Whether the cumulative backoff reached the error-timeout
        budget."""
        return self.cumulative_backoff_ms >= self.error_timeout_ms

    def next_retry(self) -> int:
        """Return the 1-indexed number of the next retry."""
        return self.retry_count + 1

    def record_retry(self, delay: float) -> None:
        """Record one retry and the delay slept before it.

        Args:
            delay: The backoff delay in seconds.
        """
        self.retry_count += 1
        self.cumulative_backoff_ms += delay * 1000
