"""OAuth token exchange functionality"""

import logging
from typing import Any, Dict, Tuple

import httpx

from settings import CLIENT_ID, REDIRECT_URI, TOKEN_URL
from .authorization import AuthorizationURLBuilder
from .exceptions import InvalidCodeFormatError, TokenEndpointError
from .models import TokenResponse

logger = logging.getLogger(__name__)


def _truncate_error_text(response_text: str) -> str:
    """Shorten an error body for log output"""
    if len(response_text) > 200:
        return f"{response_text[:100]}...{response_text[-50:]}"
    return response_text


def parse_code_with_state(code_with_state: str) -> Tuple[str, str]:
    """Split the pasted authorization code into code and state

    Args:
        code_with_state: Value shown by the callback page, "code#state"

    Returns:
        Tuple of (code, state)

    Raises:
        InvalidCodeFormatError: Unless the input splits into exactly two non-empty parts
    """
    parts = code_with_state.strip().split("#")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidCodeFormatError("Invalid code format - expected 'code#state'")
    return parts[0], parts[1]


def request_tokens(client: httpx.Client, payload: Dict[str, Any], operation: str) -> TokenResponse:
    """POST a grant to the token endpoint and parse the response

    Args:
        client: HTTP client used for the round trip
        payload: JSON request body
        operation: Description of the operation for errors and logs

    Returns:
        Parsed token response

    Raises:
        TokenEndpointError: On a non-200 status or a malformed response body
        httpx.HTTPError: On network failure or timeout
    """
    response = client.post(
        TOKEN_URL,
        json=payload,
        headers={"Content-Type": "application/json"},
    )

    if response.status_code != 200:
        logger.error(f"{operation} failed with status {response.status_code}: {_truncate_error_text(response.text)}")
        raise TokenEndpointError(
            f"{operation} failed with status {response.status_code}: {response.text}",
            status_code=response.status_code,
            body=response.text,
        )

    try:
        return TokenResponse.model_validate(response.json())
    except ValueError as e:
        raise TokenEndpointError(
            f"Failed to parse {operation.lower()} response: {e}",
            status_code=response.status_code,
            body=response.text,
        ) from e


def exchange_code(
    code_with_state: str,
    auth_builder: AuthorizationURLBuilder,
    client: httpx.Client
) -> TokenResponse:
    """Exchange authorization code for tokens

    Format and state are checked before any network call. The in-flight PKCE
    challenge is consumed on success.

    Args:
        code_with_state: Authorization code from OAuth flow, "code#state"
        auth_builder: Builder holding the in-flight PKCE challenge
        client: HTTP client used for the token request

    Returns:
        Token response

    Raises:
        OAuthNotInitializedError: If no authorization URL was generated first
        InvalidCodeFormatError: If the code is not "code#state"
        StateMismatchError: If the state does not match the one sent
        TokenEndpointError: If the token endpoint rejects the exchange
    """
    pkce = auth_builder.require_pkce()
    auth_code, state = parse_code_with_state(code_with_state)
    auth_builder.verify_state(state)

    logger.info("Exchanging authorization code for OAuth tokens...")
    token_response = request_tokens(
        client,
        {
            "grant_type": "authorization_code",
            "client_id": CLIENT_ID,
            "code": auth_code,
            "redirect_uri": REDIRECT_URI,
            "code_verifier": pkce.verifier,
            "state": state,
        },
        "Token exchange",
    )

    auth_builder.clear()
    logger.info("OAuth tokens obtained")
    return token_response
