"""Authorization client for the Claude subscription OAuth flow"""

import logging
import threading
from typing import Optional

import httpx

from settings import TOKEN_REQUEST_TIMEOUT
from .authorization import AuthorizationURLBuilder, open_browser
from .models import TokenResponse
from .token_exchange import exchange_code
from .token_refresh import refresh_tokens

logger = logging.getLogger(__name__)


class OAuthClient:
    """OAuth PKCE flow implementation

    This class orchestrates the network side of authentication:
    - Authorization URL construction (with the in-flight PKCE challenge)
    - Authorization code exchange
    - Token refresh

    No state is persisted; storing the resulting tokens is the job of
    CredentialManager. Every call is a single round trip with a bounded timeout.
    """

    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        timeout: float = TOKEN_REQUEST_TIMEOUT,
        independent_state: bool = False,
    ):
        """Initialize OAuth client

        Args:
            http_client: Optional shared httpx client, created lazily otherwise
            timeout: Token endpoint timeout in seconds
            independent_state: Send a random CSRF state instead of the verifier
        """
        self.timeout = timeout
        self.auth_builder = AuthorizationURLBuilder(independent_state=independent_state)
        self._client = http_client
        self._owns_client = http_client is None
        self._client_lock = threading.Lock()

    @property
    def http_client(self) -> httpx.Client:
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(timeout=self.timeout)
            return self._client

    # Authorization URLs
    def get_authorize_url(self) -> str:
        """Construct OAuth authorize URL with PKCE

        Must be called before exchange_code().

        Returns:
            Full authorization URL
        """
        return self.auth_builder.get_authorize_url()

    @staticmethod
    def open_browser(url: str) -> bool:
        return open_browser(url)

    # Token exchange
    def exchange_code(self, code_with_state: str) -> TokenResponse:
        """Exchange authorization code for tokens

        Args:
            code_with_state: Code copied from the callback page, "code#state"

        Returns:
            Token response
        """
        return exchange_code(code_with_state, self.auth_builder, self.http_client)

    # Token refresh
    def refresh(self, refresh_token: str) -> TokenResponse:
        """Refresh tokens with the refresh grant

        Args:
            refresh_token: Current refresh token

        Returns:
            Token response
        """
        return refresh_tokens(refresh_token, self.http_client)

    def close(self):
        """Close the HTTP client if this instance created it"""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "OAuthClient":
        return self

    def __exit__(self, *exc_info):
        self.close()
