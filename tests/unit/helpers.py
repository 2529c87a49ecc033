r"""Shared test helpers: envelopes and a dispatcher backed by
httpx.MockTransport."""

from __future__ import annotations

__all__ = [
    "Place",
    "PlacesEnvelope",
    "ScriptedTransport",
    "TEST_URL",
    "make_dispatcher",
    "ok_payload",
]

import threading
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel

from pendingresult.dispatch import Dispatcher
from pendingresult.envelope import StatusEnvelope

if TYPE_CHECKING:
    from collections.abc import Iterable

TEST_URL = "https://api.example.com/places"


class Place(BaseModel):
    name: str
    place_id: str


class PlacesEnvelope(StatusEnvelope[list[Place]]):
    results: list[Place] = []

    def result(self) -> list[Place]:
        return self.results


def ok_payload(*names: str) -> dict[str, Any]:
    return {
        "status": "OK",
        "results": [{"name": name, "place_id": f"id-{name}"} for name in names],
    }


class ScriptedTransport:
    """Serves a fixed sequence of responses (or raises exceptions), and
    records the requests it received."""

    def __init__(self, outcomes: Iterable[httpx.Response | Exception]) -> None:
        self._outcomes = list(outcomes)
        self._lock = threading.Lock()
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)
            outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_dispatcher(
    outcomes: Iterable[httpx.Response | Exception], max_workers: int = 2
) -> tuple[Dispatcher, ScriptedTransport]:
    transport = ScriptedTransport(outcomes)
    client = httpx.Client(transport=httpx.MockTransport(transport))
    return Dispatcher(client, max_workers=max_workers), transport
