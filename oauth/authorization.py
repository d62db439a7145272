"""OAuth authorization URL construction"""

import logging
import secrets
import webbrowser
from typing import Optional
from urllib.parse import urlencode

from settings import AUTHORIZE_URL, CLIENT_ID, REDIRECT_URI, SCOPES
from .exceptions import OAuthNotInitializedError, StateMismatchError
from .pkce import PKCEChallenge, generate_pkce_challenge

logger = logging.getLogger(__name__)


class AuthorizationURLBuilder:
    """Builds OAuth authorization URLs with PKCE and holds the in-flight challenge

    By default the PKCE verifier doubles as the CSRF state value, which is what
    the Claude authorization page expects. With ``independent_state`` a separate
    random nonce is sent instead and the verifier never leaves the process
    except in the token request.
    """

    def __init__(self, independent_state: bool = False):
        self.independent_state = independent_state
        self.pkce: Optional[PKCEChallenge] = None
        self.state: Optional[str] = None

    def get_authorize_url(self, scopes: str = SCOPES) -> str:
        """Construct OAuth authorize URL with a fresh PKCE challenge

        Any previously issued challenge is discarded.

        Args:
            scopes: Space separated scopes to request

        Returns:
            Full authorization URL
        """
        self.pkce = generate_pkce_challenge()
        if self.independent_state:
            self.state = secrets.token_urlsafe(32)
        else:
            self.state = self.pkce.verifier

        params = {
            "client_id": CLIENT_ID,
            "response_type": "code",
            "redirect_uri": REDIRECT_URI,
            "scope": scopes,
            "code_challenge": self.pkce.challenge,
            "code_challenge_method": self.pkce.method,
            "code": "true",  # Makes claude.ai display the code for copy/paste
            "state": self.state,
        }

        logger.debug("Generated authorization URL with new PKCE challenge")
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    def require_pkce(self) -> PKCEChallenge:
        """Get the in-flight challenge

        Raises:
            OAuthNotInitializedError: If no authorization URL has been generated
        """
        if self.pkce is None or self.state is None:
            raise OAuthNotInitializedError()
        return self.pkce

    def verify_state(self, state: str):
        """Check the state returned with the authorization code

        Raises:
            OAuthNotInitializedError: If no authorization URL has been generated
            StateMismatchError: If the state differs from the one sent
        """
        self.require_pkce()
        if not secrets.compare_digest(state.encode("utf-8"), self.state.encode("utf-8")):
            logger.warning("Authorization state mismatch - aborting code exchange")
            raise StateMismatchError()

    def clear(self):
        """Forget the in-flight challenge after use"""
        self.pkce = None
        self.state = None


def open_browser(url: str) -> bool:
    """Open a URL in the default browser

    Returns:
        True if a browser was launched
    """
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        logger.debug(f"Failed to open browser: {e}")
        return False
    if not opened:
        logger.debug("No browser available to open authorization URL")
    return opened
