r"""Retry decision and per-request retry state."""

from __future__ import annotations

__all__ = ["RetryDecider", "RetryState"]

from pendingresult.retry.decider import RetryDecider
from pendingresult.retry.state import RetryState
