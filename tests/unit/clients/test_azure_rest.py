"""
Unit tests for the Azure REST client.
"""

import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests

from brickprovisioner.clients.azure_rest import (
    RESOURCE_MANAGER_URL,
    AzureApiError,
    AzureRestClient,
    obtain_service_principal_token,
)


def make_response(status_code: int, body: Optional[Any] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode() if body is not None else b""
    return response


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.post.return_value = make_response(200, {"access_token": "token-1", "expires_in": 3600})
    return session


@pytest.fixture
def rest(session) -> AzureRestClient:
    return AzureRestClient(RESOURCE_MANAGER_URL, "scope", "tenant", "client", "secret", session=session)


class TestObtainToken:
    """Tests for obtain_service_principal_token."""

    def test_posts_client_credentials(self, session) -> None:
        token = obtain_service_principal_token("tenant", "client", "secret", "scope", session)

        assert token["access_token"] == "token-1"
        url = session.post.call_args.args[0]
        assert url == "https://login.microsoftonline.com/tenant/oauth2/v2.0/token"
        assert session.post.call_args.kwargs["data"]["grant_type"] == "client_credentials"

    def test_rejected_request(self, session) -> None:
        session.post.return_value = make_response(401, {"error": "invalid_client", "error_description": "bad secret"})

        with pytest.raises(RuntimeError, match="bad secret"):
            obtain_service_principal_token("tenant", "client", "secret", "scope", session)


class TestAzureRestClient:
    """Tests for AzureRestClient."""

    def test_token_is_cached(self, rest, session) -> None:
        session.request.return_value = make_response(200, {"value": []})

        rest.get_json("/subscriptions")
        rest.get_json("/subscriptions")

        session.post.assert_called_once()
        headers = session.request.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer token-1"

    def test_relative_and_absolute_paths(self, rest, session) -> None:
        session.request.return_value = make_response(200, {})

        rest.get_json("/subscriptions/sub")
        assert session.request.call_args.args[1] == f"{RESOURCE_MANAGER_URL}/subscriptions/sub"

        rest.get_json("https://management.azure.com/next?page=2")
        assert session.request.call_args.args[1] == "https://management.azure.com/next?page=2"

    def test_error_response_raises(self, rest, session) -> None:
        session.request.return_value = make_response(
            404, {"error": {"code": "ResourceNotFound", "message": "missing"}}
        )

        with pytest.raises(AzureApiError) as exc_info:
            rest.get_json("/subscriptions/sub")

        assert exc_info.value.status_code == 404
        assert exc_info.value.code == "ResourceNotFound"
        assert exc_info.value.message == "missing"

    def test_put_with_empty_body(self, rest, session) -> None:
        session.request.return_value = make_response(202)

        assert rest.put_json("/resource", {"a": 1}) == {}
        assert session.request.call_args.kwargs["json"] == {"a": 1}


class TestAzureApiError:
    """Tests for AzureApiError.from_response."""

    def test_non_json_body(self) -> None:
        response = requests.Response()
        response.status_code = 500
        response._content = b"gateway timeout"

        error = AzureApiError.from_response(response)

        assert error.code is None
        assert error.message == "gateway timeout"
