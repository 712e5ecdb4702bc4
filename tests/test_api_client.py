"""Tests for the operations API client (infra/api_client.py).

All HTTP goes through ``httpx.MockTransport`` — no network.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Callable

import httpx
import pytest

from hdb_helper.core.models import ResolvedConfiguration
from hdb_helper.exceptions import ApiConnectionError, ApiOperationError
from hdb_helper.infra.api_client import ApiClient


def _target() -> ResolvedConfiguration:
    return ResolvedConfiguration(
        environment_name="DEV",
        instance_url="https://dev:9925",
        username="admin",
        password="secret",
    )


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> ApiClient:
    return ApiClient(_target(), timeout=5.0, transport=httpx.MockTransport(handler))


class TestApiClient:
    def test_posts_operation_with_basic_auth(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"message": "ok"})

        result = _client(handler).run("describe_all", {"schema": "dev"})

        assert result == {"message": "ok"}
        request = seen[0]
        assert request.method == "POST"
        assert request.url.host == "dev"
        assert request.url.port == 9925
        expected = base64.b64encode(b"admin:secret").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert json.loads(request.content) == {"operation": "describe_all", "schema": "dev"}

    def test_non_json_body_returned_as_text(self) -> None:
        result = _client(lambda request: httpx.Response(200, text="plain")).run("system_information")
        assert result == "plain"

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failure_has_credentials_hint(self, status: int) -> None:
        client = _client(lambda request: httpx.Response(status, text="denied"))
        with pytest.raises(ApiOperationError) as exc_info:
            client.run("describe_all")
        assert exc_info.value.status_code == status
        assert "denied" in str(exc_info.value)
        assert "password" in (exc_info.value.hint or "")

    def test_server_error(self) -> None:
        client = _client(lambda request: httpx.Response(500, json={"error": "boom"}))
        with pytest.raises(ApiOperationError) as exc_info:
            client.run("drop_component", {"project": "x"})
        assert exc_info.value.status_code == 500
        assert "drop_component" in str(exc_info.value)

    def test_transport_error_mapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ApiConnectionError, match="https://dev:9925"):
            _client(handler).run("describe_all")
