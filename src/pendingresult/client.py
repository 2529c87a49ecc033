r"""Context manager client creating pending results.

This module provides a context manager-based client for creating many
pending results with a shared dispatcher and shared configuration. Each
pending result still owns its own retry state.
"""

from __future__ import annotations

__all__ = ["PendingClient"]

from typing import TYPE_CHECKING, Any, TypeVar

from pendingresult.config import ExecutorConfig
from pendingresult.dispatch import Dispatcher
from pendingresult.pending import HttpPendingResult
from pendingresult.request import Request

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType
    from typing import Self

    from pendingresult.envelope import ApiEnvelope

ResultT = TypeVar("ResultT")


class PendingClient:
    r"""Context manager creating pending results on a shared dispatcher.

    If no dispatcher is passed, the client creates one and closes it on
    exit. A dispatcher passed in is left open, leaving its lifecycle to
    the caller.

    Args:
        config: Optional ExecutorConfig shared by all pending results.
            If ``None``, a default ExecutorConfig is used.
        dispatcher: Optional Dispatcher. If ``None``, a new one is created
            with ``**dispatcher_kwargs``.
        **dispatcher_kwargs: Keyword arguments of the created Dispatcher
            (``client``, ``max_workers``, ``timeout``).

    Example:
        ```pycon
        >>> from pendingresult import PendingClient
        >>> from pendingresult.config import ExecutorConfig
        >>> with PendingClient(config=ExecutorConfig(error_timeout_ms=10_000)) as client:  # doctest: +SKIP
        ...     pending = client.get(
        ...         "https://api.example.com/geocode", GeocodingEnvelope, params={"address": "Paris"}
        ...     )
        ...     results = pending.wait()
        ...

        ```
    """

    def __init__(
        self,
        *,
        config: ExecutorConfig | None = None,
        dispatcher: Dispatcher | None = None,
        **dispatcher_kwargs: Any,
    ) -> None:
        self._config: ExecutorConfig = config or ExecutorConfig()
        self._owns_dispatcher = dispatcher is None
        self._dispatcher: Dispatcher = dispatcher or Dispatcher(**dispatcher_kwargs)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> ExecutorConfig:
        return self._config

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def close(self) -> None:
        """Close the dispatcher if this client created it."""
        if self._owns_dispatcher:
            self._dispatcher.close()

    def new_pending(
        self,
        request: Request,
        envelope_type: type[ApiEnvelope[ResultT]],
        **overrides: Any,
    ) -> HttpPendingResult[ResultT]:
        """Create a pending result for an existing request description.

        Args:
            request: The request description.
            envelope_type: The envelope model the body is decoded into.
            **overrides: ExecutorConfig fields overridden for this request.

        Returns:
            A new, unconsumed pending result.
        """
        return HttpPendingResult(
            request,
            self._dispatcher,
            envelope_type,
            config=self._config.merge(**overrides),
        )

    def request(
        self,
        method: str,
        url: str,
        envelope_type: type[ApiEnvelope[ResultT]],
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        content: bytes | None = None,
    ) -> HttpPendingResult[ResultT]:
        r"""Create a pending result for an HTTP request.

        Args:
            method: HTTP method (GET, POST, ...).
            url: The URL to send the request to.
            envelope_type: The envelope model the body is decoded into.
            headers: Optional request headers.
            params: Optional query parameters.
            content: Optional raw request body.

        Returns:
            A new, unconsumed pending result.
        """
        request = Request(
            method=method,
            url=url,
            headers=headers or (),
            params=params or (),
            content=content,
        )
        return self.new_pending(request, envelope_type)

    def get(
        self,
        url: str,
        envelope_type: type[ApiEnvelope[ResultT]],
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpPendingResult[ResultT]:
        """Create a pending result for a GET request."""
        return self.new_pending(Request.get(url, params=params, headers=headers), envelope_type)

    def post(
        self,
        url: str,
        envelope_type: type[ApiEnvelope[ResultT]],
        *,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpPendingResult[ResultT]:
        """Create a pending result for a POST request with a JSON body."""
        return self.new_pending(Request.post(url, json=json, headers=headers), envelope_type)
