"""Tests for the OAuth code exchange client."""

import json

import httpx
import pytest

from src.research_hub.services.oauth_client import OAuthClient, OAuthExchangeError

pytestmark = pytest.mark.unit

TOKEN_URL = "https://idp.example/auth/v1/token?grant_type=pkce"

USER_BODY = {
    "access_token": "provider-token",
    "user": {
        "id": "0b9a4c3e-3f7c-4f5e-9d0b-6a1f2f0e9a11",
        "email": "Student@IIITKottayam.ac.in",
        "user_metadata": {"full_name": "A Student"},
        "app_metadata": {"provider": "google"},
    },
}


def _client(handler, **kwargs) -> OAuthClient:
    return OAuthClient(TOKEN_URL, transport=httpx.MockTransport(handler), **kwargs)


async def test_exchange_returns_identity():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=USER_BODY)

    identity = await _client(handler, client_id="web").exchange_code("abc123")

    assert identity.subject == USER_BODY["user"]["id"]
    assert identity.email == "student@iiitkottayam.ac.in"
    assert identity.provider == "google"
    assert identity.metadata == {"full_name": "A Student"}

    payload = json.loads(seen[0].content)
    assert payload["auth_code"] == "abc123"
    assert payload["client_id"] == "web"
    assert "client_secret" not in payload


async def test_provider_error_message_is_surfaced():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error_description": "invalid flow state"})

    with pytest.raises(OAuthExchangeError, match="invalid flow state"):
        await _client(handler).exchange_code("expired")


async def test_non_json_error_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream down")

    with pytest.raises(OAuthExchangeError, match="503"):
        await _client(handler).exchange_code("abc")


async def test_response_without_user_is_rejected():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"access_token": "x"})

    with pytest.raises(OAuthExchangeError, match="no user"):
        await _client(handler).exchange_code("abc")


async def test_network_failure_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(OAuthExchangeError, match="unreachable"):
        await _client(handler).exchange_code("abc")
