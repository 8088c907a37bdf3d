from __future__ import annotations

import asyncio

import httpx
import pytest

from asana_ingest.asana.client import AsanaClient
from asana_ingest.errors import (
    AsanaAuthError,
    AsanaNotFoundError,
    AsanaRateLimitError,
    AsanaResponseError,
    AsanaTransportError,
)


def _client(handler) -> AsanaClient:
    return AsanaClient(
        "pat-123",
        base_url="https://app.asana.com/api/1.0",
        transport=httpx.MockTransport(handler),
    )


async def _fetch(handler, path: str = "/tasks/1", params=None):
    async with _client(handler) as client:
        return await client.fetch(path, params)


def test_fetch_returns_data_and_sends_credentials() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"gid": "1", "name": "Root"}})

    data = asyncio.run(_fetch(handler, "/tasks/1", {"opt_fields": "name"}))

    assert data == {"gid": "1", "name": "Root"}
    request = seen[0]
    assert request.url.path == "/api/1.0/tasks/1"
    assert request.url.params["opt_fields"] == "name"
    assert request.headers["Authorization"] == "Bearer pat-123"
    assert request.headers["Accept"] == "application/json"


@pytest.mark.parametrize(
    ("status", "error_type", "message"),
    [
        (401, AsanaAuthError, "Unauthorized: Invalid Personal Access Token."),
        (404, AsanaNotFoundError, "Not Found: Resource at /tasks/1 does not exist or you lack access."),
        (429, AsanaRateLimitError, "Rate Limit Exceeded: Please wait a moment and try again."),
    ],
)
def test_status_codes_map_to_error_types(status: int, error_type: type, message: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"errors": [{"message": "nope"}]})

    with pytest.raises(error_type) as excinfo:
        asyncio.run(_fetch(handler))

    assert str(excinfo.value) == message
    assert excinfo.value.path == "/tasks/1"


def test_rate_limit_reports_retry_after() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, headers={"Retry-After": "30"})

    with pytest.raises(AsanaRateLimitError) as excinfo:
        asyncio.run(_fetch(handler))

    assert excinfo.value.retry_after == 30.0


def test_other_statuses_become_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    with pytest.raises(AsanaTransportError) as excinfo:
        asyncio.run(_fetch(handler))

    assert excinfo.value.status_code == 503
    assert str(excinfo.value) == "Asana API Error: 503 Service Unavailable"


def test_network_failures_become_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AsanaTransportError) as excinfo:
        asyncio.run(_fetch(handler))

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_non_json_body_is_a_response_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(AsanaResponseError):
        asyncio.run(_fetch(handler))


def test_missing_envelope_is_a_response_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1, 2, 3])

    with pytest.raises(AsanaResponseError):
        asyncio.run(_fetch(handler))
