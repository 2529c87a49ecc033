r"""Immutable description of an outbound HTTP request."""

from __future__ import annotations

__all__ = ["Request"]

import json as jsonlib
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    import httpx


def _to_pairs(
    items: Mapping[str, str] | Iterable[tuple[str, str]] | None,
) -> tuple[tuple[str, str], ...]:
    if items is None:
        return ()
    if hasattr(items, "items"):
        items = items.items()
    return tuple((str(k), str(v)) for k, v in items)


@dataclass(frozen=True)
class Request:
    """Immutable description of an HTTP request.

    A ``Request`` is created once and reused to build every attempt, so
    all its parts are stored as tuples.

    Args:
        method: The HTTP method. Stored upper-cased.
        url: The URL to send the request to.
        headers: Header name/value pairs.
        params: Query parameter name/value pairs.
        content: The raw request body, if any.

    Example:
        ```pycon
        >>> from pendingresult.request import Request
        >>> request = Request.get("https://example.com/geocode", params={"address": "Paris"})
        >>> request.method
        'GET'
        >>> request.params
        (('address', 'Paris'),)

        ```
    """

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    params: tuple[tuple[str, str], ...] = ()
    content: bytes | None = None

    def __post_init__(self) -> None:
        if not self.url:
            msg = "url must not be empty"
            raise ValueError(msg)
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", _to_pairs(self.headers))
        object.__setattr__(self, "params", _to_pairs(self.params))

    @classmethod
    def get(
        cls,
        url: str,
        *,
        params: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> Request:
        """Describe a GET request."""
        return cls(method="GET", url=url, headers=_to_pairs(headers), params=_to_pairs(params))

    @classmethod
    def post(
        cls,
        url: str,
        *,
        json: Any = None,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> Request:
        """Describe a POST request with an optional JSON body.

        The body is serialized once, here.
        """
        pairs = _to_pairs(headers)
        content = None
        if json is not None:
            content = jsonlib.dumps(json).encode("utf-8")
            if not any(name.lower() == "content-type" for name, _ in pairs):
                pairs = (*pairs, ("Content-Type", "application/json"))
        return cls(method="POST", url=url, headers=pairs, params=(), content=content)

    def build(self, client: httpx.Client) -> httpx.Request:
        """Build a fresh ``httpx.Request`` for one attempt.

        Args:
            client: The client whose defaults (base URL, headers, ...)
                apply to the request.

        Returns:
            A new request object; it is never shared between attempts.
        """
        return client.build_request(
            self.method,
            self.url,
            headers=list(self.headers),
            params=list(self.params),
            content=self.content,
        )
