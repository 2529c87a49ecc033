r"""Callback-driven dispatch of HTTP requests on a worker thread pool.

The dispatcher is the only place where requests leave the process: every
attempt, including the attempts of blocking ``wait()`` calls, goes through
``Call.enqueue`` so that outbound concurrency stays bounded by the pool.

Each ``Call`` delivers exactly one outcome to its callback, on a worker
thread: ``on_response`` with the response, or ``on_failure`` with the
exception that prevented the exchange.
"""

from __future__ import annotations

__all__ = ["Call", "CallCancelledError", "DispatchCallback", "Dispatcher"]

import contextvars
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Protocol

import httpx

from pendingresult.config import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT
from pendingresult.validation import validate_max_workers, validate_timeout

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType
    from typing import Self

    from pendingresult.request import Request

logger: logging.Logger = logging.getLogger(__name__)


class DispatchCallback(Protocol):
    """Receiver of the outcome of one ``Call``."""

    def on_response(self, response: httpx.Response) -> None:
        """Called with the response when the exchange completed."""

    def on_failure(self, request: Request, exc: Exception) -> None:
        """Called when no response could be obtained."""


class CallCancelledError(RuntimeError):
    """Delivered to ``on_failure`` when a call is cancelled before it
    starts."""


class Call:
    """One attempt of a request, bound to a dispatcher.

    A call can be enqueued once. Cancellation is best-effort: a call
    cancelled before a worker picks it up fails with
    ``CallCancelledError``; a call already in flight still delivers its
    response.

    Args:
        dispatcher: The dispatcher executing the call.
        request: The request description.
    """

    def __init__(self, dispatcher: Dispatcher, request: Request) -> None:
        self.request = request
        self._dispatcher = dispatcher
        self._lock = threading.Lock()
        self._executed = False
        self._cancelled = False

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.request.method!r}, "
            f"url={self.request.url!r}, executed={self._executed}, "
            f"cancelled={self._cancelled})"
        )

    @property
    def is_executed(self) -> bool:
        return self._executed

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def enqueue(self, callback: DispatchCallback) -> None:
        """Schedule the exchange and the delivery of its outcome.

        Args:
            callback: Receives the outcome on a worker thread.

        Raises:
            RuntimeError: If the call was already enqueued, or if the
                dispatcher is closed.
        """
        with self._lock:
            if self._executed:
                msg = "Call already executed"
                raise RuntimeError(msg)
            self._executed = True
        self._dispatcher.submit(self, callback)

    def cancel(self) -> None:
        """Request cancellation of the call.

        Calling it several times, or after the outcome was delivered, has
        no effect.
        """
        with self._lock:
            self._cancelled = True

    def run(self, callback: DispatchCallback) -> None:
        """Perform the exchange and deliver its outcome.

        This runs on a dispatcher worker. Exactly one of the callback
        methods is invoked.
        """
        try:
            response = self._exchange()
        except Exception as exc:  # every failure must reach the callback
            logger.debug(f"{self.request.method} request to {self.request.url} failed: {exc!r}")
            self._deliver(callback.on_failure, self.request, exc)
            return
        self._deliver(callback.on_response, response)

    def _exchange(self) -> httpx.Response:
        if self._cancelled:
            msg = f"{self.request.method} request to {self.request.url} was cancelled"
            raise CallCancelledError(msg)
        client = self._dispatcher.client
        return client.send(self.request.build(client))

    def _deliver(self, handler: Callable[..., None], *args: object) -> None:
        try:
            handler(*args)
        except Exception:
            logger.exception(f"Dispatch callback for {self.request.url} raised")


class Dispatcher:
    """Executes calls on a thread pool and delivers outcomes to
    callbacks.

    The caller's ``contextvars`` context is copied into the worker for
    each call, so values such as the logging correlation ID survive the
    thread hop.

    Note:
        Retries of requests consumed with ``set_callback()`` sleep on a
        worker thread before re-enqueuing. Size ``max_workers`` so the pool
        can absorb sleeping workers under the expected retry load.

    Args:
        client: Optional ``httpx.Client``. If ``None``, a client is created
            with ``timeout`` and closed by ``close()``.
        max_workers: Number of worker threads. Must be > 0.
        timeout: Timeout in seconds of the created client. Must be > 0.

    Example:
        ```pycon
        >>> from pendingresult.dispatch import Dispatcher
        >>> from pendingresult.request import Request
        >>> with Dispatcher(max_workers=2) as dispatcher:  # doctest: +SKIP
        ...     call = dispatcher.new_call(Request.get("https://example.com"))
        ...     call.enqueue(my_callback)
        ...

        ```
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        validate_max_workers(max_workers)
        validate_timeout(timeout)
        self._owns_client = client is None
        self.client: httpx.Client = client or httpx.Client(timeout=timeout)
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="pendingresult-dispatch"
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(max_workers={self.max_workers})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def new_call(self, request: Request) -> Call:
        """Create a new call for one attempt of ``request``."""
        return Call(self, request)

    def submit(self, call: Call, callback: DispatchCallback) -> None:
        """Schedule ``call`` on the pool.

        Raises:
            RuntimeError: If the dispatcher is closed.
        """
        context = contextvars.copy_context()
        self._executor.submit(context.run, call.run, callback)

    def close(self) -> None:
        """Wait for scheduled calls, then release the pool and the owned
        client."""
        self._executor.shutdown(wait=True)
        if self._owns_client:
            self.client.close()
