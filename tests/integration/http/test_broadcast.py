from __future__ import annotations

import pytest

from push_broadcast.domain.models.messaging import SendResponse

CORS_ORIGIN = "Access-Control-Allow-Origin"


def valid_payload(**overrides):
    payload = {
        "tokens": ["A", "B", "C"],
        "notification": {"title": "Sale", "body": "Everything is 20% off"},
    }
    payload.update(overrides)
    return payload


async def test_preflight_returns_cors_headers(client, provider):
    response = await client.options("/")
    assert response.status_code == 204
    assert response.content == b""
    assert response.headers[CORS_ORIGIN] == "*"
    assert response.headers["Access-Control-Allow-Methods"] == "POST"
    assert response.headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"
    assert provider.sent == []


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "TRACE", "PROPFIND"])
async def test_non_post_methods_are_rejected(client, provider, method):
    response = await client.request(method, "/")
    assert response.status_code == 500
    assert response.json() == {"error": "Only POST requests are accepted"}
    assert response.headers[CORS_ORIGIN] == "*"
    assert provider.sent == []


@pytest.mark.parametrize(
    "body",
    [
        {"notification": {"title": "t", "body": "b"}},
        {"tokens": "A", "notification": {"title": "t", "body": "b"}},
        {"tokens": [], "notification": {"title": "t", "body": "b"}},
        {"tokens": ["A", ""], "notification": {"title": "t", "body": "b"}},
    ],
)
async def test_invalid_tokens(client, provider, body):
    response = await client.post("/", json=body)
    assert response.status_code == 500
    assert response.json() == {"error": "No valid tokens provided"}
    assert provider.sent == []


async def test_body_that_is_not_json_is_treated_as_empty(client):
    response = await client.post(
        "/", content=b"tokens=A", headers={"Content-Type": "text/plain"}
    )
    assert response.status_code == 500
    assert response.json() == {"error": "No valid tokens provided"}


@pytest.mark.parametrize(
    "notification",
    [None, {"title": "Sale"}, {"body": "Everything is 20% off"}, {"title": "", "body": "x"}],
)
async def test_invalid_notification(client, notification):
    payload = valid_payload(notification=notification)
    if notification is None:
        del payload["notification"]
    response = await client.post("/", json=payload)
    assert response.status_code == 500
    assert response.json() == {"error": "Invalid notification format"}


async def test_partial_delivery_reports_failed_tokens(client, provider):
    provider.responses = [
        SendResponse.delivered("m1"),
        SendResponse.failed("not-registered"),
        SendResponse.delivered("m3"),
    ]
    response = await client.post("/", json=valid_payload())
    assert response.status_code == 200
    assert response.headers[CORS_ORIGIN] == "*"
    assert response.json() == {
        "success": 2,
        "failure": 1,
        "errors": [{"token": "B", "error": "not-registered"}],
    }


async def test_omitted_data_defaults_to_empty_mapping(client, provider):
    response = await client.post("/", json=valid_payload())
    assert response.status_code == 200
    assert response.json() == {"success": 3, "failure": 0, "errors": []}
    message = provider.sent[0]
    assert message.to_dict() == {
        "notification": {"title": "Sale", "body": "Everything is 20% off"},
        "data": {},
        "tokens": ["A", "B", "C"],
    }


async def test_data_is_forwarded_to_provider(client, provider):
    response = await client.post("/", json=valid_payload(data={"promo": "SPRING"}))
    assert response.status_code == 200
    assert provider.sent[0].data == {"promo": "SPRING"}


async def test_identical_requests_give_identical_responses(client, provider):
    provider.responses = [
        SendResponse.failed("invalid-argument"),
        SendResponse.failed("not-registered"),
        SendResponse.delivered(),
    ]
    first = await client.post("/", json=valid_payload())
    second = await client.post("/", json=valid_payload())
    assert first.json() == second.json()
    assert first.json()["errors"] == [
        {"token": "A", "error": "invalid-argument"},
        {"token": "B", "error": "not-registered"},
    ]


async def test_provider_failure_is_reported(client, failing_provider):
    response = await client.post("/", json=valid_payload())
    assert response.status_code == 500
    assert response.json() == {"error": "Quota exceeded"}
    assert response.headers[CORS_ORIGIN] == "*"


async def test_provider_failure_without_message_uses_default(client, provider):
    provider.error = RuntimeError()
    response = await client.post("/", json=valid_payload())
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers[CORS_ORIGIN] == "*"


async def test_lifespan_closes_provider(app, provider):
    async with app.router.lifespan_context(app):
        pass
    assert provider.closed is True


async def test_other_paths_keep_their_own_method_handling(client):
    response = await client.post("/health")
    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}
