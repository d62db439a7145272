"""Tests for authorization URL construction and the code exchange."""

import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from oauth import (
    InvalidCodeFormatError,
    OAuthClient,
    OAuthNotInitializedError,
    StateMismatchError,
    TokenEndpointError,
)
from oauth.authorization import AuthorizationURLBuilder
from oauth.pkce import create_code_challenge
from settings import AUTHORIZE_URL, CLIENT_ID, REDIRECT_URI, SCOPES, TOKEN_URL
from conftest import token_json


def _query(url: str) -> dict:
    return {key: values[0] for key, values in parse_qs(urlparse(url).query).items()}


class TestAuthorizationURL:

    def test_url_parameters(self):
        builder = AuthorizationURLBuilder()
        url = builder.get_authorize_url()

        assert url.startswith(f"{AUTHORIZE_URL}?")
        params = _query(url)
        assert params["client_id"] == CLIENT_ID
        assert params["response_type"] == "code"
        assert params["redirect_uri"] == REDIRECT_URI
        assert params["scope"] == SCOPES
        assert params["code_challenge_method"] == "S256"
        assert params["code_challenge"] == create_code_challenge(builder.pkce.verifier)
        assert params["code"] == "true"

    def test_state_is_verifier_by_default(self):
        builder = AuthorizationURLBuilder()
        params = _query(builder.get_authorize_url())
        assert params["state"] == builder.pkce.verifier

    def test_independent_state(self):
        builder = AuthorizationURLBuilder(independent_state=True)
        params = _query(builder.get_authorize_url())
        assert params["state"] == builder.state
        assert params["state"] != builder.pkce.verifier

    def test_new_url_replaces_challenge(self):
        builder = AuthorizationURLBuilder()
        builder.get_authorize_url()
        first = builder.pkce
        builder.get_authorize_url()
        assert builder.pkce.verifier != first.verifier

    def test_verify_state_accepts_non_ascii_input(self):
        builder = AuthorizationURLBuilder()
        builder.get_authorize_url()
        with pytest.raises(StateMismatchError):
            builder.verify_state("état")


class TestExchangeCode:

    def test_exchange_before_url_is_not_initialized(self, mock_router):
        route = mock_router.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=token_json()))
        with OAuthClient() as client:
            with pytest.raises(OAuthNotInitializedError):
                client.exchange_code("code#state")
        assert not route.called

    @pytest.mark.parametrize("code", ["nocode", "a#b#c", "#state", "code#", "", "   "])
    def test_malformed_code(self, mock_router, code):
        route = mock_router.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=token_json()))
        with OAuthClient() as client:
            client.get_authorize_url()
            with pytest.raises(InvalidCodeFormatError):
                client.exchange_code(code)
        assert not route.called

    def test_state_mismatch_makes_no_request(self, mock_router):
        route = mock_router.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=token_json()))
        with OAuthClient() as client:
            client.get_authorize_url()
            with pytest.raises(StateMismatchError):
                client.exchange_code("code#not-the-state")
        assert not route.called

    def test_successful_exchange(self, mock_router):
        route = mock_router.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=token_json()))
        with OAuthClient() as client:
            state = _query(client.get_authorize_url())["state"]
            verifier = client.auth_builder.pkce.verifier

            token_response = client.exchange_code(f"  the-code#{state}\n")

            assert token_response.access_token == "access-1"
            assert token_response.refresh_token == "refresh-1"
            assert token_response.expires_in == 3600
            # The challenge is single use
            assert client.auth_builder.pkce is None

        body = json.loads(route.calls.last.request.content)
        assert body == {
            "grant_type": "authorization_code",
            "client_id": CLIENT_ID,
            "code": "the-code",
            "redirect_uri": REDIRECT_URI,
            "code_verifier": verifier,
            "state": state,
        }

    def test_exchange_with_independent_state(self, mock_router):
        route = mock_router.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=token_json()))
        with OAuthClient(independent_state=True) as client:
            state = _query(client.get_authorize_url())["state"]
            verifier = client.auth_builder.pkce.verifier
            client.exchange_code(f"the-code#{state}")

        body = json.loads(route.calls.last.request.content)
        assert body["code_verifier"] == verifier
        assert body["state"] == state

    def test_upstream_rejection_carries_status_and_body(self, mock_router):
        mock_router.post(TOKEN_URL).mock(
            return_value=httpx.Response(400, json={"error": "invalid_grant"})
        )
        with OAuthClient() as client:
            state = _query(client.get_authorize_url())["state"]
            with pytest.raises(TokenEndpointError) as exc_info:
                client.exchange_code(f"the-code#{state}")
            assert client.auth_builder.pkce is not None

        assert exc_info.value.status_code == 400
        assert "invalid_grant" in exc_info.value.body

    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"access_token": "a"}),
        httpx.Response(200, json={"access_token": "a", "refresh_token": "r", "expires_in": "soon"}),
    ])
    def test_malformed_response_body(self, mock_router, response):
        mock_router.post(TOKEN_URL).mock(return_value=response)
        with OAuthClient() as client:
            state = _query(client.get_authorize_url())["state"]
            with pytest.raises(TokenEndpointError) as exc_info:
                client.exchange_code(f"the-code#{state}")
        assert exc_info.value.status_code == 200

    def test_network_error_is_not_wrapped(self, mock_router):
        mock_router.post(TOKEN_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))
        with OAuthClient() as client:
            state = _query(client.get_authorize_url())["state"]
            with pytest.raises(httpx.ConnectTimeout):
                client.exchange_code(f"the-code#{state}")


class TestRefresh:

    def test_refresh_grant_payload(self, mock_router):
        route = mock_router.post(TOKEN_URL).mock(
            return_value=httpx.Response(200, json=token_json(access="access-2", refresh="refresh-2"))
        )
        with OAuthClient() as client:
            token_response = client.refresh("refresh-1")

        assert token_response.access_token == "access-2"
        assert json.loads(route.calls.last.request.content) == {
            "grant_type": "refresh_token",
            "client_id": CLIENT_ID,
            "refresh_token": "refresh-1",
        }

    def test_refresh_rejected(self, mock_router):
        mock_router.post(TOKEN_URL).mock(return_value=httpx.Response(401, text="expired"))
        with OAuthClient() as client:
            with pytest.raises(TokenEndpointError) as exc_info:
                client.refresh("refresh-1")
        assert exc_info.value.status_code == 401
        assert exc_info.value.body == "expired"

    def test_injected_client_is_not_closed(self, mock_router):
        mock_router.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=token_json()))
        http_client = httpx.Client()
        with OAuthClient(http_client=http_client) as client:
            client.refresh("refresh-1")
        assert not http_client.is_closed
        http_client.close()
