r"""Backoff strategies for retry delays.

This package provides the strategy used to compute how long to sleep
before re-issuing a request that failed with a retryable status.
"""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "JitteredExponentialBackoff"]

from pendingresult.backoff.base import BaseBackoffStrategy
from pendingresult.backoff.exponential import JitteredExponentialBackoff
