r"""Retry decision logic for responses with a retryable status."""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING

from pendingresult.config import RETRY_STATUS_CODES

if TYPE_CHECKING:
    import httpx

    from pendingresult.retry.state import RetryState

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a completed attempt should be retried.

    A retry happens only when the status code is retryable and the
    cumulative backoff is still strictly below the error-timeout budget.
    The budget is only checked here: a delay authorized by this check is
    always slept in full, even if it overshoots the budget.

    Args:
        status_forcelist: Tuple of retryable HTTP status codes.

    Example:
        ```pycon
        >>> import httpx
        >>> from pendingresult.retry import RetryDecider, RetryState
        >>> decider = RetryDecider()
        >>> decider.should_retry(httpx.Response(503), RetryState(error_timeout_ms=1000))
        True
        >>> decider.should_retry(httpx.Response(404), RetryState(error_timeout_ms=1000))
        False

        ```
    """

    def __init__(self, status_forcelist: tuple[int, ...] = RETRY_STATUS_CODES) -> None:
        self.status_forcelist = status_forcelist

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(status_forcelist={self.status_forcelist})"

    def should_retry(self, response: httpx.Response, state: RetryState) -> bool:
        """Determine if the response should trigger a retry.

        Args:
            response: The response of the attempt.
            state: The retry state of the logical request.

        Returns:
            ``True`` if a new attempt should be issued.
        """
        if response.status_code not in self.status_forcelist:
            return False
        if state.budget_exhausted:
            logger.debug(
                f"Not retrying status {response.status_code}: error timeout exhausted "
                f"({state.cumulative_backoff_ms:.0f}ms >= {state.error_timeout_ms:.0f}ms)"
            )
            return False
        return True
