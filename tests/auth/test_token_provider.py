"""Tests for bearer token acquisition"""

from __future__ import annotations

import asyncio

import aiohttp
import pytest

from buzzex.auth.token_provider import TokenProvider
from buzzex.core.exceptions import AuthenticationError, MalformedResponseError, TransportError
from buzzex.models.auth import Token

from conftest import FakeResponse


pytestmark = pytest.mark.asyncio


@pytest.fixture
def provider(transport):
    return TokenProvider(transport, "https://api.buzzex.io/", timeout_ms=5000)


async def test_fetch_token_posts_client_credentials(provider, fake_session):
    fake_session._responses.append(FakeResponse(body={"access_token": "tok-1", "token_type": "Bearer", "expires_in": 3600}))

    token = await provider.fetch_token("key", "secret")

    assert isinstance(token, Token)
    assert token.access_token == "tok-1"
    assert token.authorization_header == "Bearer tok-1"

    call = fake_session.calls[0]
    assert call.method == "POST"
    assert call.url == "https://api.buzzex.io/api/token"
    assert call.json == {
        "grant_type": "client_credentials",
        "client_id": "key",
        "client_secret": "secret",
    }
    assert call.headers["User-Agent"] == "Buzzex Python API Client"


async def test_fetch_token_keeps_extra_fields(provider, fake_session):
    fake_session._responses.append(FakeResponse(body={"access_token": "tok", "scope": "trade"}))

    token = await provider.fetch_token("key", "secret")

    assert token.model_extra == {"scope": "trade"}


async def test_fetch_token_surfaces_network_error(provider, fake_session):
    """A transport failure raises instead of stalling"""
    fake_session.error = aiohttp.ClientConnectionError("connection refused")

    with pytest.raises(TransportError):
        await provider.fetch_token("key", "secret")


async def test_fetch_token_surfaces_timeout(provider, fake_session):
    fake_session.error = asyncio.TimeoutError()

    with pytest.raises(TransportError, match="timed out"):
        await provider.fetch_token("key", "secret")


async def test_fetch_token_without_access_token(provider, fake_session):
    fake_session._responses.append(FakeResponse(body={"error": "invalid_client"}))

    with pytest.raises(AuthenticationError) as exc_info:
        await provider.fetch_token("key", "secret")

    assert exc_info.value.details == {"error": "invalid_client"}


async def test_fetch_token_rejected_credentials(provider, fake_session):
    fake_session._responses.append(FakeResponse(status=401, body={"error": "invalid_client"}))

    with pytest.raises(AuthenticationError) as exc_info:
        await provider.fetch_token("key", "bad")

    assert isinstance(exc_info.value.original_exception, TransportError)


async def test_fetch_token_server_error_stays_transport_error(provider, fake_session):
    fake_session._responses.append(FakeResponse(status=502, body="Bad Gateway"))

    with pytest.raises(TransportError) as exc_info:
        await provider.fetch_token("key", "secret")

    assert not isinstance(exc_info.value, AuthenticationError)
    assert exc_info.value.details["status"] == 502


async def test_fetch_token_malformed_body(provider, fake_session):
    fake_session._responses.append(FakeResponse(body="<html>oops</html>"))

    with pytest.raises(MalformedResponseError):
        await provider.fetch_token("key", "secret")


@pytest.mark.parametrize("body,field", [
    ({"access_token": 12345}, "access_token"),
    ({"access_token": "tok", "expires_in": "never"}, "expires_in"),
])
async def test_fetch_token_invalid_token_shape(provider, fake_session, body, field):
    fake_session._responses.append(FakeResponse(body=body))

    with pytest.raises(AuthenticationError, match="invalid token") as exc_info:
        await provider.fetch_token("key", "secret")

    assert exc_info.value.details == {"fields": [field]}
    assert exc_info.value.original_exception is not None
