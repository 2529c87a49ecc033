from __future__ import annotations

import httpx
import pytest

from pendingresult.exceptions import (
    ApplicationError,
    DecodeError,
    HttpError,
    PendingResultError,
    TransportError,
)


@pytest.mark.parametrize(
    "error",
    [
        TransportError("GET", "https://example.com", "boom"),
        HttpError(500),
        ApplicationError("NOT_FOUND"),
        DecodeError("bad body"),
    ],
)
def test_errors_share_base_class(error: PendingResultError) -> None:
    assert isinstance(error, PendingResultError)
    assert isinstance(error, RuntimeError)


def test_pending_result_error_cause() -> None:
    cause = ValueError("inner")
    error = PendingResultError("outer", cause=cause)
    assert str(error) == "outer"
    assert error.message == "outer"
    assert error.cause is cause


def test_transport_error() -> None:
    cause = httpx.ConnectError("refused")
    error = TransportError("POST", "https://example.com", "POST failed", cause=cause)
    assert error.method == "POST"
    assert error.url == "https://example.com"
    assert error.cause is cause
    assert str(error) == "POST failed"


def test_http_error() -> None:
    response = httpx.Response(503)
    error = HttpError(503, "Service Unavailable", response=response)
    assert str(error) == "Server Error: 503 Service Unavailable"
    assert error.status_code == 503
    assert error.reason == "Service Unavailable"
    assert error.response is response


def test_http_error_without_reason() -> None:
    error = HttpError(599)
    assert str(error) == "Server Error: 599"
    assert error.response is None


def test_application_error_with_message() -> None:
    error = ApplicationError("REQUEST_DENIED", "Invalid key.")
    assert str(error) == "REQUEST_DENIED: Invalid key."
    assert error.status == "REQUEST_DENIED"
    assert error.error_message == "Invalid key."


def test_application_error_without_message() -> None:
    error = ApplicationError("OVER_QUERY_LIMIT")
    assert str(error) == "OVER_QUERY_LIMIT"
    assert error.error_message is None


def test_decode_error_is_catchable_as_base() -> None:
    with pytest.raises(PendingResultError, match="bad body"):
        raise DecodeError("bad body")
