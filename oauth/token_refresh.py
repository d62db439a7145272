"""OAuth token refresh functionality"""

import logging

import httpx

from settings import CLIENT_ID
from .models import TokenResponse
from .token_exchange import request_tokens

logger = logging.getLogger(__name__)


def refresh_tokens(refresh_token: str, client: httpx.Client) -> TokenResponse:
    """Obtain a new token pair with the refresh grant

    A single round trip; retries are left to the caller.

    Args:
        refresh_token: Current refresh token
        client: HTTP client used for the token request

    Returns:
        Token response with the new access and refresh tokens

    Raises:
        TokenEndpointError: If the token endpoint rejects the refresh
        httpx.HTTPError: On network failure or timeout
    """
    logger.info("Attempting to refresh OAuth tokens...")
    token_response = request_tokens(
        client,
        {
            "grant_type": "refresh_token",
            "client_id": CLIENT_ID,
            "refresh_token": refresh_token,
        },
        "Token refresh",
    )
    logger.info("Successfully refreshed OAuth tokens")
    return token_response
