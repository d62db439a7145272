"""Credential lifecycle manager: store, validate, refresh and clear OAuth tokens"""

import asyncio
import logging
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from settings import REFRESH_BUFFER_MS, SINGLE_FLIGHT_REFRESH
from .client import OAuthClient
from .exceptions import (
    CredentialsNotFoundError,
    RefreshTokenMissingError,
    TokenEndpointError,
    TokenRefreshError,
)
from .models import OAuthCredentials, TokenResponse
from .storage import CredentialStore

logger = logging.getLogger(__name__)

# One refresh lock per credential document, shared by every manager in the process
_REFRESH_LOCKS_LOCK = threading.Lock()
_REFRESH_LOCKS: Dict[Path, threading.Lock] = {}


def _get_refresh_lock(path: Path) -> threading.Lock:
    key = Path(path).expanduser().resolve()
    with _REFRESH_LOCKS_LOCK:
        lock = _REFRESH_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _REFRESH_LOCKS[key] = lock
        return lock


def _now_ms() -> int:
    return int(time.time() * 1000)


def _format_duration(seconds: int) -> str:
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    days = hours // 24
    if days > 0:
        return f"{days}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


class CredentialManager:
    """Manages the Claude subscription credential with automatic refresh

    The credential document on disk is the only source of truth; nothing is
    cached between calls. get_valid_token() is the entry point every API
    request should use.
    """

    def __init__(
        self,
        store: Optional[CredentialStore] = None,
        oauth_client: Optional[OAuthClient] = None,
        buffer_ms: int = REFRESH_BUFFER_MS,
        single_flight: bool = SINGLE_FLIGHT_REFRESH,
    ):
        """Initialize credential manager

        Args:
            store: Credential store (default location if None)
            oauth_client: Client used for refresh grants (created if None)
            buffer_ms: Treat tokens as expired this long before their expiry
            single_flight: Serialize concurrent refreshes so only one caller
                hits the token endpoint
        """
        self.store_backend = store or CredentialStore()
        self.oauth_client = oauth_client or OAuthClient()
        self.buffer_ms = buffer_ms
        self.single_flight = single_flight
        self._refresh_lock = _get_refresh_lock(self.store_backend.token_file)

    def store(self, token_response: TokenResponse) -> OAuthCredentials:
        """Persist a token response, replacing any prior credential

        Args:
            token_response: Token endpoint response

        Returns:
            The stored credential with its absolute expiry
        """
        credentials = OAuthCredentials.from_token_response(token_response, now_ms=_now_ms())
        auth_data = self.store_backend.load()
        auth_data.claudesub = credentials
        self.store_backend.save(auth_data)
        logger.info("Successfully stored claudesub OAuth credentials")
        return credentials

    def get(self) -> OAuthCredentials:
        """Read the stored credential

        Raises:
            CredentialsNotFoundError: If no credential is stored
            CredentialsStorageError: If the document cannot be read
        """
        credentials = self.store_backend.load().claudesub
        if credentials is None:
            raise CredentialsNotFoundError()
        return credentials

    def has_auth(self) -> bool:
        """Check whether a credential is stored, regardless of expiry"""
        try:
            self.get()
        except CredentialsNotFoundError:
            return False
        return True

    def _is_valid(self, credentials: OAuthCredentials) -> bool:
        return _now_ms() < credentials.expires - self.buffer_ms

    def is_valid(self) -> bool:
        """Check the stored access token is outside the early-refresh window

        Raises:
            CredentialsNotFoundError: If no credential is stored
        """
        return self._is_valid(self.get())

    def refresh_now(self, stale_access_token: Optional[str] = None) -> OAuthCredentials:
        """Refresh the access token regardless of its local expiry

        With single-flight enabled, a caller that waited for another refresh
        to finish and finds the stored access token no longer equal to
        stale_access_token returns the new credential without a second
        network call.

        Args:
            stale_access_token: Access token the caller saw rejected or expired

        Returns:
            The credential now stored

        Raises:
            CredentialsNotFoundError: If no credential is stored
            RefreshTokenMissingError: If the credential has no refresh token
            TokenRefreshError: If the token endpoint rejects the refresh
            httpx.HTTPError: On network failure or timeout
        """
        if not self.single_flight:
            return self._refresh(self.get())

        with self._refresh_lock:
            credentials = self.get()
            if stale_access_token is not None and credentials.access != stale_access_token:
                logger.debug("Credential already refreshed by a concurrent caller")
                return credentials
            return self._refresh(credentials)

    def _refresh(self, credentials: OAuthCredentials) -> OAuthCredentials:
        if not credentials.refresh:
            logger.warning("No refresh token available for refresh")
            raise RefreshTokenMissingError()

        try:
            token_response = self.oauth_client.refresh(credentials.refresh)
        except TokenEndpointError as e:
            raise TokenRefreshError(f"Failed to refresh token: {e}") from e

        refreshed = self.store(token_response)
        logger.info("Successfully refreshed claudesub OAuth token")
        return refreshed

    def get_valid_token(self) -> str:
        """Get a valid OAuth access token, refreshing it first if needed

        Returns:
            Access token valid for at least the refresh buffer

        Raises:
            CredentialsNotFoundError: If the user has never authenticated
            RefreshTokenMissingError: If a refresh is needed but impossible
            TokenRefreshError: If the refresh is rejected
        """
        credentials = self.get()
        if not self._is_valid(credentials):
            logger.info("Token expired or expiring soon, attempting automatic refresh...")
            self.refresh_now(stale_access_token=credentials.access)
            credentials = self.get()
        return credentials.access

    async def get_valid_token_async(self) -> str:
        """Async version of get_valid_token, run in a worker thread"""
        return await asyncio.to_thread(self.get_valid_token)

    async def refresh_now_async(self, stale_access_token: Optional[str] = None) -> OAuthCredentials:
        """Async version of refresh_now, run in a worker thread"""
        return await asyncio.to_thread(self.refresh_now, stale_access_token)

    def clear(self):
        """Remove the stored credential (sign-out). Clearing nothing is a no-op."""
        if not self.store_backend.exists():
            return
        auth_data = self.store_backend.load()
        auth_data.claudesub = None
        self.store_backend.save(auth_data)
        logger.info("Cleared claudesub OAuth credentials")

    def get_status(self) -> Dict[str, Any]:
        """Get token status without exposing secrets"""
        auth_data = self.store_backend.load()
        credentials = auth_data.claudesub
        if credentials is None:
            return {
                "has_tokens": False,
                "is_expired": True,
                "needs_refresh": True,
                "expires_at": None,
                "time_until_expiry": "No tokens",
                "scope": None,
                "token_file": str(self.store_backend.token_file),
            }

        now_ms = _now_ms()
        expires_str = datetime.fromtimestamp(credentials.expires / 1000).isoformat(timespec="seconds")
        is_expired = now_ms >= credentials.expires
        delta_seconds = abs(credentials.expires - now_ms) // 1000

        if is_expired:
            time_str = f"{_format_duration(delta_seconds)} ago"
        else:
            time_str = _format_duration(delta_seconds)

        return {
            "has_tokens": True,
            "is_expired": is_expired,
            "needs_refresh": not self._is_valid(credentials),
            "expires_at": expires_str,
            "time_until_expiry": time_str,
            "scope": credentials.scope,
            "token_file": str(self.store_backend.token_file),
        }

    def close(self):
        self.oauth_client.close()
