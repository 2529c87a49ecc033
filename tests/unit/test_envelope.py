r"""Unit tests for envelopes and field naming policies."""

from __future__ import annotations

from typing import ClassVar

import pytest

from pendingresult.envelope import ApiEnvelope, FieldNamingPolicy, StatusEnvelope
from pendingresult.exceptions import ApplicationError

from .helpers import Place, PlacesEnvelope

###########################################
#     Tests for FieldNamingPolicy         #
###########################################


@pytest.mark.parametrize(
    ("policy", "key", "expected"),
    [
        (FieldNamingPolicy.IDENTITY, "placeId", "placeId"),
        (FieldNamingPolicy.LOWER_CAMEL_CASE, "placeId", "place_id"),
        (FieldNamingPolicy.LOWER_CAMEL_CASE, "formattedAddress", "formatted_address"),
        (FieldNamingPolicy.UPPER_CAMEL_CASE, "PlaceId", "place_id"),
        (FieldNamingPolicy.LOWER_CASE_WITH_DASHES, "place-id", "place_id"),
        (FieldNamingPolicy.LOWER_CASE_WITH_UNDERSCORES, "place_id", "place_id"),
    ],
)
def test_to_field_name(policy: FieldNamingPolicy, key: str, expected: str) -> None:
    assert policy.to_field_name(key) == expected


def test_remap_keys_recursive() -> None:
    payload = {"status": "OK", "results": [{"placeId": "a", "geometry": {"locationType": "ROOFTOP"}}]}
    assert FieldNamingPolicy.LOWER_CAMEL_CASE.remap_keys(payload) == {
        "status": "OK",
        "results": [{"place_id": "a", "geometry": {"location_type": "ROOFTOP"}}],
    }


def test_remap_keys_identity_returns_payload() -> None:
    payload = {"placeId": "a"}
    assert FieldNamingPolicy.IDENTITY.remap_keys(payload) is payload


def test_remap_keys_leaves_values_untouched() -> None:
    assert FieldNamingPolicy.LOWER_CAMEL_CASE.remap_keys({"name": "someValue"}) == {
        "name": "someValue"
    }


####################################
#     Tests for StatusEnvelope     #
####################################


@pytest.mark.parametrize("status", ["OK", "ZERO_RESULTS"])
def test_status_envelope_successful(status: str) -> None:
    envelope = PlacesEnvelope.model_validate({"status": status})
    assert envelope.successful()
    assert envelope.result() == []


@pytest.mark.parametrize("status", ["NOT_FOUND", "OVER_QUERY_LIMIT", "REQUEST_DENIED", "UNKNOWN_ERROR"])
def test_status_envelope_error(status: str) -> None:
    envelope = PlacesEnvelope.model_validate({"status": status, "error_message": "nope"})
    assert not envelope.successful()
    error = envelope.error()
    assert isinstance(error, ApplicationError)
    assert error.status == status
    assert error.error_message == "nope"


def test_status_envelope_result() -> None:
    envelope = PlacesEnvelope.model_validate(
        {"status": "OK", "results": [{"name": "Cafe", "place_id": "1"}]}
    )
    assert envelope.result() == [Place(name="Cafe", place_id="1")]


def test_status_envelope_custom_success_statuses() -> None:
    class CountEnvelope(StatusEnvelope[int]):
        SUCCESS_STATUSES: ClassVar[frozenset[str]] = frozenset({"DONE"})
        count: int = 0

        def result(self) -> int:
            return self.count

    assert CountEnvelope.model_validate({"status": "DONE", "count": 2}).successful()
    assert not CountEnvelope.model_validate({"status": "OK"}).successful()


def test_api_envelope_is_abstract() -> None:
    with pytest.raises(TypeError):
        ApiEnvelope()
