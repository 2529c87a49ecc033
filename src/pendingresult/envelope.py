r"""Typed response envelopes and JSON field naming policies.

An envelope is the decoded shape of a response body. It distinguishes
"the call succeeded and the payload holds a result" from "the exchange
succeeded but the payload reports a logical failure". Envelopes are
pydantic models, so any pydantic-supported field type can be used for the
result.

Example:
    ```pycon
    >>> from pydantic import BaseModel
    >>> from pendingresult.envelope import StatusEnvelope
    >>> class Elevation(BaseModel):
    ...     elevation: float
    ...
    >>> class ElevationEnvelope(StatusEnvelope[list[Elevation]]):
    ...     results: list[Elevation] = []
    ...     def result(self) -> list[Elevation]:
    ...         return self.results
    ...
    >>> envelope = ElevationEnvelope.model_validate(
    ...     {"status": "OK", "results": [{"elevation": 1608.6}]}
    ... )
    >>> envelope.successful()
    True
    >>> envelope.result()[0].elevation
    1608.6

    ```
"""

from __future__ import annotations

__all__ = ["ApiEnvelope", "FieldNamingPolicy", "StatusEnvelope"]

from abc import abstractmethod
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_snake

from pendingresult.exceptions import ApplicationError

ResultT = TypeVar("ResultT")


class FieldNamingPolicy(Enum):
    """Mapping from the JSON keys of a payload to envelope field names.

    The policy names the convention used on the wire; envelope fields are
    always declared in snake_case.

    Attributes:
        IDENTITY: Wire keys are used as-is.
        LOWER_CAMEL_CASE: ``errorMessage`` maps to ``error_message``.
        UPPER_CAMEL_CASE: ``ErrorMessage`` maps to ``error_message``.
        LOWER_CASE_WITH_DASHES: ``error-message`` maps to ``error_message``.
        LOWER_CASE_WITH_UNDERSCORES: ``error_message`` maps to itself.

    Example:
        ```pycon
        >>> from pendingresult.envelope import FieldNamingPolicy
        >>> FieldNamingPolicy.LOWER_CAMEL_CASE.to_field_name("placeId")
        'place_id'
        >>> FieldNamingPolicy.LOWER_CASE_WITH_DASHES.to_field_name("place-id")
        'place_id'

        ```
    """

    IDENTITY = "identity"
    LOWER_CAMEL_CASE = "lower_camel_case"
    UPPER_CAMEL_CASE = "upper_camel_case"
    LOWER_CASE_WITH_DASHES = "lower_case_with_dashes"
    LOWER_CASE_WITH_UNDERSCORES = "lower_case_with_underscores"

    def to_field_name(self, key: str) -> str:
        """Map one wire key to the matching field name."""
        if self in (FieldNamingPolicy.IDENTITY, FieldNamingPolicy.LOWER_CASE_WITH_UNDERSCORES):
            return key
        if self is FieldNamingPolicy.LOWER_CASE_WITH_DASHES:
            return key.replace("-", "_")
        return to_snake(key)

    def remap_keys(self, payload: Any) -> Any:
        """Recursively rename the keys of every JSON object in
        ``payload``.

        Args:
            payload: A decoded JSON value.

        Returns:
            The same value with all object keys mapped to field names.
        """
        if self is FieldNamingPolicy.IDENTITY:
            return payload
        if isinstance(payload, dict):
            return {self.to_field_name(k): self.remap_keys(v) for k, v in payload.items()}
        if isinstance(payload, list):
            return [self.remap_keys(item) for item in payload]
        return payload


class ApiEnvelope(BaseModel, Generic[ResultT]):
    """Base class of typed response envelopes.

    Subclasses declare the payload fields and implement the three accessors.
    Unknown payload keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    @abstractmethod
    def successful(self) -> bool:
        """Return ``True`` if the payload holds a result."""

    @abstractmethod
    def result(self) -> ResultT:
        """Return the typed result held by a successful payload."""

    @abstractmethod
    def error(self) -> ApplicationError:
        """Return the typed error held by an unsuccessful payload."""


class StatusEnvelope(ApiEnvelope[ResultT], Generic[ResultT]):
    """Envelope for APIs reporting their outcome in a ``status`` field.

    The payload is successful when ``status`` is one of
    ``SUCCESS_STATUSES``; otherwise ``error()`` builds an
    ``ApplicationError`` from ``status`` and ``error_message``.
    Subclasses add the result field and implement ``result()``.
    """

    SUCCESS_STATUSES: ClassVar[frozenset[str]] = frozenset({"OK", "ZERO_RESULTS"})

    status: str
    error_message: str | None = None

    def successful(self) -> bool:
        return self.status in self.SUCCESS_STATUSES

    def error(self) -> ApplicationError:
        return ApplicationError(self.status, self.error_message)
