r"""Pending results of HTTP requests, consumable by callback or by
blocking wait.

A pending result issues one logical request through a ``Dispatcher``,
retries it with jittered exponential backoff while the server answers
with a retryable status, and decodes the final response into a typed
result or a typed error.

Two consumption modes are supported, exactly one per instance:

- ``set_callback(on_result, on_failure)``: non-blocking. The outcome is
  delivered later, on a dispatcher worker, to exactly one of the handlers.
- ``wait()`` / ``wait_ignore_error()``: blocking. Each attempt is still
  dispatched through the pool; the calling thread parks on a single-slot
  rendezvous until the attempt completes.

Example:
    ```pycon
    >>> from pendingresult import Dispatcher, HttpPendingResult, Request
    >>> with Dispatcher() as dispatcher:  # doctest: +SKIP
    ...     pending = HttpPendingResult(
    ...         Request.get("https://api.example.com/geocode", params={"address": "Paris"}),
    ...         dispatcher,
    ...         GeocodingEnvelope,
    ...     )
    ...     results = pending.wait()
    ...

    ```
"""

from __future__ import annotations

__all__ = ["HttpPendingResult", "PendingResult"]

import logging
import queue
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from pendingresult.callbacks import invoke_on_attempt, invoke_on_retry
from pendingresult.config import ExecutorConfig
from pendingresult.decoder import ResponseDecoder
from pendingresult.dispatch import CallCancelledError
from pendingresult.exceptions import PendingResultError, TransportError
from pendingresult.retry import RetryDecider, RetryState

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from pendingresult.dispatch import Dispatcher
    from pendingresult.envelope import ApiEnvelope
    from pendingresult.request import Request

logger: logging.Logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


class PendingResult(ABC, Generic[ResultT]):
    """A result that will be available once a request completes."""

    @abstractmethod
    def set_callback(
        self,
        on_result: Callable[[ResultT], None],
        on_failure: Callable[[PendingResultError], None] | None = None,
    ) -> None:
        """Perform the request and deliver its outcome to one of the
        handlers, without blocking."""

    @abstractmethod
    def wait(self) -> ResultT:
        """Perform the request and block until its result is available."""

    @abstractmethod
    def wait_ignore_error(self) -> ResultT | None:
        """Like ``wait()``, but return ``None`` instead of raising."""

    @abstractmethod
    def cancel(self) -> None:
        """Request cancellation of the in-flight attempt."""


@dataclass(frozen=True)
class _Outcome:
    response: httpx.Response | None = None
    error: Exception | None = None


class _Rendezvous:
    """Dispatch callback handing one outcome to one blocked thread.

    One instance is created per attempt of ``wait()``; the dispatcher
    pushes exactly one outcome into its single slot.
    """

    def __init__(self) -> None:
        self._slot: queue.Queue[_Outcome] = queue.Queue(maxsize=1)

    def on_response(self, response: httpx.Response) -> None:
        self._slot.put_nowait(_Outcome(response=response))

    def on_failure(self, request: Request, exc: Exception) -> None:  # noqa: ARG002
        self._slot.put_nowait(_Outcome(error=exc))

    def take(self) -> _Outcome:
        return self._slot.get()


class _CompletionRelay(Generic[ResultT]):
    """Dispatch callback driving a ``set_callback()`` request.

    The same relay is enqueued for every attempt of the request; it hands
    each response back to its owner for the retry decision, and the
    terminal outcome to the caller's handlers, once.
    """

    def __init__(
        self,
        owner: HttpPendingResult[ResultT],
        on_result: Callable[[ResultT], None],
        on_failure: Callable[[PendingResultError], None] | None,
    ) -> None:
        self._owner = owner
        self._on_result = on_result
        self._on_failure = on_failure
        self._delivered = False

    def on_response(self, response: httpx.Response) -> None:
        self._owner._handle_relayed_response(self, response)

    def on_failure(self, request: Request, exc: Exception) -> None:  # noqa: ARG002
        self.fail(self._owner._transport_error(exc))

    def succeed(self, value: ResultT) -> None:
        if not self._mark_delivered():
            return
        try:
            self._on_result(value)
        except Exception:
            logger.exception("on_result callback raised")

    def fail(self, error: PendingResultError) -> None:
        if not self._mark_delivered():
            return
        if self._on_failure is None:
            logger.warning(f"Request failed and no on_failure callback is set: {error}")
            return
        try:
            self._on_failure(error)
        except Exception:
            logger.exception("on_failure callback raised")

    def _mark_delivered(self) -> bool:
        if self._delivered:
            logger.warning("Ignoring a second terminal outcome for the same request")
            return False
        self._delivered = True
        self._owner._done = True
        return True


class HttpPendingResult(PendingResult[ResultT]):
    r"""Pending result of an HTTP request with retry and typed decoding.

    The first attempt is created at construction and issued when the
    result is consumed. While an attempt answers with a status in
    ``RETRY_STATUS_CODES`` and the cumulative backoff is below
    ``config.error_timeout_ms``, the thread that observed the response
    sleeps for the backoff delay and issues a new attempt. Transport
    failures are never retried.

    The backoff sleep happens on the caller thread in ``wait()`` mode and
    on a dispatcher worker in ``set_callback()`` mode. In callback mode the
    worker re-enqueues the next attempt and returns, so a retry never
    holds a worker while waiting for another one.

    Args:
        request: The request description, reused for every attempt.
        dispatcher: The dispatcher every attempt goes through.
        envelope_type: The envelope model the body is decoded into.
        config: Optional ExecutorConfig. If ``None``, a default one is used.
        decider: Optional RetryDecider. If ``None``, retries happen on
            ``RETRY_STATUS_CODES``.

    Raises:
        ValueError: If the configuration is invalid.
    """

    def __init__(
        self,
        request: Request,
        dispatcher: Dispatcher,
        envelope_type: type[ApiEnvelope[ResultT]],
        *,
        config: ExecutorConfig | None = None,
        decider: RetryDecider | None = None,
    ) -> None:
        self._request = request
        self._dispatcher = dispatcher
        self._config: ExecutorConfig = config or ExecutorConfig()
        self._decoder: ResponseDecoder[ResultT] = ResponseDecoder(
            envelope_type, naming_policy=self._config.naming_policy
        )
        self._decider = decider or RetryDecider()
        self._state = RetryState(error_timeout_ms=self._config.error_timeout_ms)
        self._call = dispatcher.new_call(request)
        self._consumed = False
        self._done = False

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self._request.method!r}, "
            f"url={self._request.url!r}, retry_count={self._state.retry_count}, "
            f"done={self._done})"
        )

    @property
    def request(self) -> Request:
        return self._request

    @property
    def retry_count(self) -> int:
        """Number of retries performed so far."""
        return self._state.retry_count

    @property
    def cumulative_backoff_ms(self) -> float:
        """Backoff slept so far, in milliseconds."""
        return self._state.cumulative_backoff_ms

    @property
    def is_done(self) -> bool:
        """Whether the terminal outcome was produced."""
        return self._done

    def set_callback(
        self,
        on_result: Callable[[ResultT], None],
        on_failure: Callable[[PendingResultError], None] | None = None,
    ) -> None:
        r"""Issue the request and deliver its outcome to a handler.

        The method returns immediately. Exactly one of ``on_result`` and
        ``on_failure`` is later called on a dispatcher worker thread. If
        the dispatcher is already closed, ``on_failure`` receives a
        ``TransportError`` on the calling thread instead.

        Args:
            on_result: Called with the decoded result.
            on_failure: Called with the error. If ``None``, the error is
                logged.

        Raises:
            RuntimeError: If the pending result was already consumed.
        """
        self._consume()
        relay = _CompletionRelay(self, on_result, on_failure)
        try:
            self._issue(relay)
        except TransportError as exc:
            relay.fail(exc)

    def wait(self) -> ResultT:
        r"""Issue the request and block until the result is available.

        Returns:
            The decoded result.

        Raises:
            TransportError: If an attempt could not be completed.
            HttpError: If the final status is unsuccessful.
            DecodeError: If the body does not match the envelope.
            ApplicationError: If the envelope reports a logical failure.
            RuntimeError: If the pending result was already consumed.
        """
        self._consume()
        try:
            response = self._exchange()
            while self._decider.should_retry(response, self._state):
                self._backoff(response)
                response = self._exchange()
            return self._decoder.decode(response)
        finally:
            self._done = True

    def wait_ignore_error(self) -> ResultT | None:
        r"""Issue the request and block until it completes, ignoring
        errors.

        Returns:
            The decoded result, or ``None`` if the request failed.
        """
        try:
            return self.wait()
        except PendingResultError as exc:
            logger.debug(f"Ignoring error of {self._request.method} {self._request.url}: {exc}")
            return None

    def cancel(self) -> None:
        """Cancel the current attempt, best-effort.

        An attempt already in flight may still deliver its response. A
        retry decided before the cancellation still happens. Has no effect
        once the outcome was delivered.
        """
        if self._done:
            return
        logger.debug(f"Cancelling {self._request.method} request to {self._request.url}")
        self._call.cancel()

    def _consume(self) -> None:
        if self._consumed:
            msg = "A pending result can only be consumed once"
            raise RuntimeError(msg)
        self._consumed = True

    def _issue(self, callback: _Rendezvous | _CompletionRelay[ResultT]) -> None:
        invoke_on_attempt(
            self._config.on_attempt,
            url=self._request.url,
            method=self._request.method,
            attempt=self._state.retry_count,
        )
        logger.debug(
            f"Issuing {self._request.method} request to {self._request.url} "
            f"(attempt {self._state.retry_count + 1})"
        )
        try:
            self._call.enqueue(callback)
        except RuntimeError as exc:
            # the dispatcher is closed
            raise self._transport_error(exc) from exc

    def _exchange(self) -> httpx.Response:
        rendezvous = _Rendezvous()
        self._issue(rendezvous)
        outcome = rendezvous.take()
        if outcome.error is not None:
            raise self._transport_error(outcome.error) from outcome.error
        return outcome.response

    def _backoff(self, response: httpx.Response) -> None:
        retry_number = self._state.next_retry()
        delay = self._config.backoff.delay_for_retry(retry_number)
        logger.debug(
            f"Sleeping between errors for {delay * 1000:.0f}ms (retry #{retry_number}, "
            f"already slept {self._state.cumulative_backoff_ms:.0f}ms)"
        )
        invoke_on_retry(
            self._config.on_retry,
            url=self._request.url,
            method=self._request.method,
            retry_count=retry_number,
            sleep_time=delay,
            status_code=response.status_code,
            cumulative_backoff_ms=self._state.cumulative_backoff_ms,
        )
        time.sleep(delay)
        self._state.record_retry(delay)
        logger.info(
            f"Retrying request. Retry #{self._state.retry_count}",
            extra={
                "url": self._request.url,
                "status_code": response.status_code,
                "retry_count": self._state.retry_count,
                "cumulative_backoff_ms": self._state.cumulative_backoff_ms,
            },
        )
        self._call = self._dispatcher.new_call(self._request)

    def _handle_relayed_response(
        self, relay: _CompletionRelay[ResultT], response: httpx.Response
    ) -> None:
        try:
            if self._decider.should_retry(response, self._state):
                self._backoff(response)
                self._issue(relay)
                return
            value = self._decoder.decode(response)
        except PendingResultError as exc:
            relay.fail(exc)
            return
        except Exception as exc:  # raised by a hook
            error = PendingResultError(
                f"{self._request.method} request to {self._request.url} failed: {exc!r}",
                cause=exc,
            )
            error.__cause__ = exc
            relay.fail(error)
            return
        relay.succeed(value)

    def _transport_error(self, exc: Exception) -> TransportError:
        method, url = self._request.method, self._request.url
        if isinstance(exc, CallCancelledError):
            message = f"{method} request to {url} was cancelled"
        else:
            message = f"{method} request to {url} failed: {exc}"
        error = TransportError(method=method, url=url, message=message, cause=exc)
        error.__cause__ = exc
        return error
