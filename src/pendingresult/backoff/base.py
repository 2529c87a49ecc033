r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before retrying a
    failed request based on the retry number.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the unjittered backoff delay for a given retry.

        Args:
            attempt: The retry number (0-indexed). For example,
                attempt=0 is the first retry, attempt=1 is the second retry, etc.

        Returns:
            The calculated delay in seconds.
        """

    def delay_for_retry(self, retry_number: int) -> float:
        """Return the delay to sleep before the given retry.

        Args:
            retry_number: The retry number (1-indexed). The first retry is 1.

        Returns:
            The delay in seconds.

        Raises:
            ValueError: If retry_number is lower than 1.
        """
        if retry_number < 1:
            msg = f"retry_number must be >= 1, got {retry_number}"
            raise ValueError(msg)
        return self.calculate(retry_number - 1)
