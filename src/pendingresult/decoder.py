r"""Response decoding into typed results or typed errors.

This module turns a completed HTTP response into either the typed result
held by its envelope, or one of the typed errors of
``pendingresult.exceptions``.
"""

from __future__ import annotations

__all__ = ["ResponseDecoder"]

import logging
from typing import TYPE_CHECKING, Generic, TypeVar

from pydantic import ValidationError
from pydantic_core import from_json

from pendingresult.envelope import FieldNamingPolicy
from pendingresult.exceptions import DecodeError, HttpError, PendingResultError

if TYPE_CHECKING:
    import httpx

    from pendingresult.envelope import ApiEnvelope

logger: logging.Logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


class ResponseDecoder(Generic[ResultT]):
    """Decodes responses into the result of a typed envelope.

    Args:
        envelope_type: The envelope model to validate the body into.
        naming_policy: Mapping from JSON keys to envelope field names.

    Example:
        ```pycon
        >>> import httpx
        >>> from pendingresult.decoder import ResponseDecoder
        >>> from pendingresult.envelope import StatusEnvelope
        >>> class CountEnvelope(StatusEnvelope[int]):
        ...     count: int = 0
        ...     def result(self) -> int:
        ...         return self.count
        ...
        >>> decoder = ResponseDecoder(CountEnvelope)
        >>> decoder.decode(httpx.Response(200, json={"status": "OK", "count": 3}))
        3

        ```
    """

    def __init__(
        self,
        envelope_type: type[ApiEnvelope[ResultT]],
        naming_policy: FieldNamingPolicy = FieldNamingPolicy.IDENTITY,
    ) -> None:
        self.envelope_type = envelope_type
        self.naming_policy = naming_policy

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(envelope_type={self.envelope_type.__qualname__}, "
            f"naming_policy={self.naming_policy})"
        )

    def check_status(self, response: httpx.Response) -> None:
        """Raise an error for an unsuccessful HTTP status.

        The APIs answer 200 even when the request fails at the application
        level, so only transport-level statuses are handled here.

        Args:
            response: The response to check.

        Raises:
            HttpError: If the status code is not 2xx.
        """
        if not response.is_success:
            logger.debug(f"Response has unsuccessful status {response.status_code}")
            raise HttpError(
                status_code=response.status_code,
                reason=response.reason_phrase,
                response=response,
            )

    def parse(self, response: httpx.Response) -> ApiEnvelope[ResultT]:
        """Parse the response body into the envelope.

        Malformed UTF-8 sequences are replaced with U+FFFD instead of
        aborting the decode. The JSON parser bounds the nesting depth, so
        a pathologically nested body is a ``DecodeError`` too.

        Args:
            response: A response with a successful status.

        Returns:
            The validated envelope.

        Raises:
            DecodeError: If the body is not JSON or does not match the
                envelope.
        """
        text = response.content.decode("utf-8", errors="replace")
        try:
            payload = from_json(text)
        except ValueError as exc:
            msg = f"Response body is not valid JSON: {exc}"
            raise DecodeError(msg, cause=exc) from exc
        try:
            return self.envelope_type.model_validate(self.naming_policy.remap_keys(payload))
        except ValidationError as exc:
            msg = (
                f"Response body does not match {self.envelope_type.__qualname__} "
                f"({exc.error_count()} validation errors)"
            )
            raise DecodeError(msg, cause=exc) from exc

    def decode(self, response: httpx.Response) -> ResultT:
        """Decode a response into the typed result.

        Args:
            response: The response of the final attempt.

        Returns:
            The result held by the envelope.

        Raises:
            HttpError: If the HTTP status is unsuccessful.
            DecodeError: If the body cannot be parsed into the envelope.
            ApplicationError: If the envelope reports a logical failure.
        """
        self.check_status(response)
        envelope = self.parse(response)
        try:
            if envelope.successful():
                return envelope.result()
            error = envelope.error()
        except PendingResultError:
            raise
        except Exception as exc:
            msg = f"{self.envelope_type.__qualname__} could not produce its outcome: {exc!r}"
            raise DecodeError(msg, cause=exc) from exc
        logger.debug(f"API reported a logical failure: {error}")
        raise error
