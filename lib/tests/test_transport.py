from __future__ import annotations

import json

import httpx
import pytest

from servicebus_client import (
    ApiError,
    ClientConfig,
    NetworkError,
    ServerError,
    TooManyRequestsError,
    UnauthorizedError,
    ValidationError,
)
from servicebus_client.transport import Transport


def _make_transport(handler) -> Transport:
    cfg = ClientConfig(base_uri="https://ns.example.test", sas_key_name="key", sas_key_value="secret")
    return Transport(cfg, transport=httpx.MockTransport(handler))


def _recording(status_code: int = 200, **response_kwargs):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, **response_kwargs)

    return seen, handler


def test_get_sends_params_as_query() -> None:
    seen, handler = _recording()
    t = _make_transport(handler)
    t.get("queues", {"top": 5})
    assert seen[0].url == "https://ns.example.test/queues?top=5"
    assert seen[0].content == b""


def test_body_key_is_sent_raw() -> None:
    seen, handler = _recording(201)
    t = _make_transport(handler)
    outcome = t.post("q/messages", {"body": "not <json>"}, {"Authorization": "sig"})
    assert outcome.status_code == 201
    assert seen[0].content == b"not <json>"
    assert seen[0].headers["Authorization"] == "sig"
    assert seen[0].headers["Content-Type"] == "application/json"


def test_other_params_are_form_encoded() -> None:
    seen, handler = _recording()
    t = _make_transport(handler)
    t.put("q", {"a": "1", "b": "x y"})
    assert seen[0].headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert seen[0].content == b"a=1&b=x+y"


def test_default_headers_can_be_overridden() -> None:
    seen, handler = _recording()
    t = _make_transport(handler)
    t.post("q/messages", {"body": "<x/>"}, {"Content-Type": "application/atom+xml"})
    assert seen[0].headers["Content-Type"] == "application/atom+xml"
    assert seen[0].headers["Accept"] == "application/json"


def test_redirects_are_not_followed() -> None:
    seen, handler = _recording(302, headers={"Location": "https://elsewhere.example.test/"})
    t = _make_transport(handler)
    outcome = t.get("q")
    assert outcome.status_code == 302
    assert len(seen) == 1


@pytest.mark.parametrize(
    ("status", "error_type"),
    [
        (401, UnauthorizedError),
        (403, UnauthorizedError),
        (404, UnauthorizedError),
        (422, ValidationError),
        (429, TooManyRequestsError),
        (418, ApiError),
    ],
)
def test_client_errors_are_classified(status: int, error_type: type) -> None:
    _, handler = _recording(status, text='{"detail": "nope"}')
    t = _make_transport(handler)
    with pytest.raises(error_type) as exc_info:
        t.delete("q/messages/head")
    assert type(exc_info.value) is error_type
    assert exc_info.value.status_code == status


def test_validation_error_carries_decoded_body() -> None:
    _, handler = _recording(422, json={"errors": {"body": "too large"}})
    t = _make_transport(handler)
    with pytest.raises(ValidationError) as exc_info:
        t.post("q/messages", {"body": "x"})
    assert exc_info.value.errors == {"errors": {"body": "too large"}}


def test_unlisted_client_error_carries_raw_body() -> None:
    _, handler = _recording(418, text="short and stout")
    t = _make_transport(handler)
    with pytest.raises(ApiError) as exc_info:
        t.get("q")
    assert exc_info.value.details == "short and stout"


def test_server_errors_are_not_classified() -> None:
    _, handler = _recording(503, text="busy")
    t = _make_transport(handler)
    with pytest.raises(ServerError) as exc_info:
        t.get("q")
    assert exc_info.value.status_code == 503
    assert exc_info.value.body == "busy"
    assert not isinstance(exc_info.value, ApiError)


def test_connection_failures_raise_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    t = _make_transport(handler)
    with pytest.raises(NetworkError) as exc_info:
        t.get("q")
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def _echo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=request.content)


def test_json_body_round_trips_through_outcome() -> None:
    payload = {"id": 7, "tags": ["a", "b"], "nested": {"ok": True, "ratio": 0.25, "none": None}, "text": "żółw"}
    t = _make_transport(_echo)
    outcome = t.post("q/messages", {"body": json.dumps(payload)})
    assert outcome.as_json() == payload


def test_non_json_body_reports_false_but_keeps_raw_bytes() -> None:
    t = _make_transport(_echo)
    outcome = t.post("q/messages", {"body": "plain text body"})
    assert outcome.as_json() is False
    assert outcome.as_response().content == b"plain text body"


def test_empty_body_reports_false() -> None:
    _, handler = _recording(204)
    t = _make_transport(handler)
    assert t.delete("q/messages/head").as_json() is False


def test_each_request_returns_its_own_outcome() -> None:
    t = _make_transport(_echo)
    first = t.post("q/messages", {"body": '{"n": 1}'})
    second = t.post("q/messages", {"body": '{"n": 2}'})
    assert first.as_json() == {"n": 1}
    assert second.as_json() == {"n": 2}
