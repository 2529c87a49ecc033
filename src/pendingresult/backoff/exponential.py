r"""Exponential backoff strategy with multiplicative jitter."""

from __future__ import annotations

__all__ = ["JitteredExponentialBackoff"]

import logging
import random

from pendingresult.backoff.base import BaseBackoffStrategy

logger: logging.Logger = logging.getLogger(__name__)


class JitteredExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy with multiplicative jitter.

    Calculates the delay of the n-th retry (1-indexed) as
    ``base_delay * multiplier ** (n - 1)`` seconds, then multiplies it by a
    uniform random factor in ``[0.5, 1.5)``. With the defaults, the first
    retry waits around 0.5s, the second around 0.75s, the third around
    1.125s, and so on.

    Args:
        base_delay: The delay of the first retry before jitter, in seconds.
        multiplier: The growth factor between two consecutive retries.
            Must be >= 1.
        jitter: Whether to apply the random factor.

    Example:
        ```pycon
        >>> from pendingresult.backoff import JitteredExponentialBackoff
        >>> backoff = JitteredExponentialBackoff(jitter=False)
        >>> backoff.calculate(0)
        0.5
        >>> backoff.calculate(1)
        0.75
        >>> backoff.delay_for_retry(3)
        1.125
        >>> delay = JitteredExponentialBackoff().delay_for_retry(1)
        >>> 0.25 <= delay < 0.75
        True

        ```
    """

    def __init__(
        self,
        base_delay: float = 0.5,
        multiplier: float = 1.5,
        jitter: bool = True,
    ) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if multiplier < 1:
            msg = f"multiplier must be >= 1, got {multiplier}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.multiplier = multiplier
        self.jitter = jitter

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"multiplier={self.multiplier}, jitter={self.jitter})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate the unjittered exponential delay.

        Args:
            attempt: The retry number (0-indexed).

        Returns:
            The calculated delay: base_delay * (multiplier ** attempt).
        """
        return self.base_delay * (self.multiplier**attempt)

    def delay_for_retry(self, retry_number: int) -> float:
        """Return the jittered delay to sleep before the given retry.

        Args:
            retry_number: The retry number (1-indexed).

        Returns:
            The delay in seconds, scaled by a factor in ``[0.5, 1.5)``
            when jitter is enabled.
        """
        delay = super().delay_for_retry(retry_number)
        if not self.jitter:
            return delay
        factor = 0.5 + random.random()  # noqa: S311
        logger.debug(f"Applying jitter factor {factor:.3f} to base delay {delay:.3f}s")
        return delay * factor
