r"""Exception hierarchy for pending HTTP results.

Every failure surfaced to a caller, either raised from ``wait()`` or
passed to the failure callback of ``set_callback()``, is an instance of
``PendingResultError``:

- ``TransportError``: the exchange could not be completed (connection
  failure, cancelled call, ...). Never retried.
- ``HttpError``: the server answered with an unsuccessful HTTP status that
  is not retryable, or the retry budget is exhausted.
- ``ApplicationError``: the HTTP exchange succeeded but the decoded
  envelope reports a logical failure.
- ``DecodeError``: the response body could not be parsed into the
  expected envelope.
"""

from __future__ import annotations

__all__ = [
    "ApplicationError",
    "DecodeError",
    "HttpError",
    "PendingResultError",
    "TransportError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class PendingResultError(RuntimeError):
    """Base class of all errors delivered by a pending result.

    Args:
        message: A descriptive error message.
        cause: The underlying exception, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class TransportError(PendingResultError):
    """Raised when the dispatcher could not complete the HTTP exchange.

    Args:
        method: The HTTP method of the request.
        url: The URL of the request.
        message: A descriptive error message.
        cause: The transport exception reported by the dispatcher.

    Example:
        ```pycon
        >>> from pendingresult.exceptions import TransportError
        >>> err = TransportError("GET", "https://example.com", "connection refused")
        >>> err.url
        'https://example.com'

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.method = method
        self.url = url


class HttpError(PendingResultError):
    """Raised for an unsuccessful HTTP status.

    Args:
        status_code: The HTTP status code of the response.
        reason: The HTTP reason phrase of the response.
        response: The response object, if available.

    Example:
        ```pycon
        >>> from pendingresult.exceptions import HttpError
        >>> err = HttpError(status_code=404, reason="Not Found")
        >>> str(err)
        'Server Error: 404 Not Found'
        >>> err.status_code
        404

        ```
    """

    def __init__(
        self,
        status_code: int,
        reason: str = "",
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(f"Server Error: {status_code} {reason}".rstrip())
        self.status_code = status_code
        self.reason = reason
        self.response = response


class ApplicationError(PendingResultError):
    """Raised when the API reports a logical failure in the payload.

    Args:
        status: The API-defined status or error code.
        message: The API-provided error message, if any.

    Example:
        ```pycon
        >>> from pendingresult.exceptions import ApplicationError
        >>> err = ApplicationError("REQUEST_DENIED", "The provided API key is invalid.")
        >>> str(err)
        'REQUEST_DENIED: The provided API key is invalid.'

        ```
    """

    def __init__(self, status: str, message: str | None = None) -> None:
        super().__init__(f"{status}: {message}" if message else status)
        self.status = status
        self.error_message = message


class DecodeError(PendingResultError):
    """Raised when the response body does not match the expected
    envelope."""
