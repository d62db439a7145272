"""Pytest configuration and fixtures for claudesub tests."""

from typing import Any, Dict, Optional

import pytest
import respx

from oauth import CredentialManager, CredentialStore, OAuthClient, TokenResponse
from settings import SCOPES

NOW_MS = 1_700_000_000_000


class FakeClock:
    """Stand-in for the credential manager's millisecond clock"""

    def __init__(self, now_ms: int):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int):
        self.now_ms += ms


def token_json(
    access: str = "access-1",
    refresh: str = "refresh-1",
    expires_in: int = 3600,
    scope: Optional[str] = SCOPES
) -> Dict[str, Any]:
    """Token endpoint response body"""
    body = {
        "access_token": access,
        "refresh_token": refresh,
        "expires_in": expires_in,
        "token_type": "Bearer",
    }
    if scope is not None:
        body["scope"] = scope
    return body


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock(NOW_MS)
    monkeypatch.setattr("oauth.token_manager._now_ms", fake)
    return fake


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "claudesub"


@pytest.fixture
def store(data_dir) -> CredentialStore:
    return CredentialStore(str(data_dir))


@pytest.fixture
def oauth_client():
    client = OAuthClient()
    yield client
    client.close()


@pytest.fixture
def manager(store, oauth_client) -> CredentialManager:
    return CredentialManager(store=store, oauth_client=oauth_client)


@pytest.fixture
def mock_router():
    """respx router; every request not matched by a route fails the test"""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def stored_credentials(manager, clock):
    """Store a credential expiring in an hour and return it"""
    return manager.store(TokenResponse(**token_json()))
