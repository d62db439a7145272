"""Authenticating HTTP transports for OAuth Bearer access to the Anthropic API

Each outbound request is copied, stamped with a currently valid access token
and the Claude Code header set, then sent. A 401 triggers exactly one forced
refresh and one resend; a second 401 is terminal.
"""

import logging
from typing import Optional

import httpx

from headers import API_KEY_HEADERS, FINGERPRINT_HEADERS, OAUTH_BETA_HEADERS, SENSITIVE_HEADERS
from oauth import AuthenticationRejectedError, CredentialManager, OAuthError

logger = logging.getLogger(__name__)


def build_authorized_request(request: httpx.Request, access_token: str) -> httpx.Request:
    """Copy a request with OAuth headers applied

    The original request is left untouched so it can be rebuilt for a retry.
    Its body must already have been read.

    Args:
        request: Request as built by the SDK
        access_token: OAuth Bearer access token

    Returns:
        New request carrying the Bearer token and Claude Code headers
    """
    headers = request.headers.copy()

    for name in API_KEY_HEADERS + FINGERPRINT_HEADERS:
        headers.pop(name, None)

    headers["Authorization"] = f"Bearer {access_token}"
    headers["anthropic-beta"] = OAUTH_BETA_HEADERS

    authorized = httpx.Request(
        method=request.method,
        url=request.url,
        headers=headers,
        stream=request.stream,
        extensions=dict(request.extensions),
    )
    _log_request_headers(authorized)
    return authorized


def _log_request_headers(request: httpx.Request):
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(f"{request.method} {request.url}")
    for header_name, header_value in request.headers.items():
        # Redact sensitive headers
        if header_name.lower() in SENSITIVE_HEADERS:
            logger.debug(f"  {header_name}: [REDACTED]")
        else:
            logger.debug(f"  {header_name}: {header_value}")


def _rejected_error(response: httpx.Response) -> AuthenticationRejectedError:
    body = response.text
    return AuthenticationRejectedError(
        "Authentication rejected after token refresh - please login again",
        status_code=response.status_code,
        body=body,
    )


class OAuthTransport(httpx.BaseTransport):
    """Sync transport injecting OAuth Bearer tokens, for httpx.Client"""

    def __init__(self, credential_manager: CredentialManager, transport: Optional[httpx.BaseTransport] = None):
        """
        Args:
            credential_manager: Source of valid access tokens
            transport: Transport that actually sends requests (default: httpx.HTTPTransport)
        """
        self.credential_manager = credential_manager
        self._transport = transport or httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        # Buffer the body so the request can be replayed after a refresh
        request.read()

        access_token = self.credential_manager.get_valid_token()
        response = self._transport.handle_request(build_authorized_request(request, access_token))
        if response.status_code != 401:
            return response

        response.close()
        logger.warning("Received 401 Unauthorized, forcing token refresh and retrying once")

        try:
            access_token = self.credential_manager.refresh_now(stale_access_token=access_token).access
        except (OAuthError, httpx.HTTPError) as e:
            logger.error(f"Failed to refresh token: {e}")
            raise AuthenticationRejectedError(
                f"Authentication failed and token refresh failed: {e}",
                status_code=401,
            ) from e

        response = self._transport.handle_request(build_authorized_request(request, access_token))
        if response.status_code == 401:
            try:
                response.read()
                error = _rejected_error(response)
            finally:
                response.close()
            logger.error("Request rejected as unauthorized after token refresh")
            raise error

        return response

    def close(self):
        self._transport.close()


class AsyncOAuthTransport(httpx.AsyncBaseTransport):
    """Async transport injecting OAuth Bearer tokens, for httpx.AsyncClient"""

    def __init__(self, credential_manager: CredentialManager, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            credential_manager: Source of valid access tokens
            transport: Transport that actually sends requests (default: httpx.AsyncHTTPTransport)
        """
        self.credential_manager = credential_manager
        self._transport = transport or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()

        access_token = await self.credential_manager.get_valid_token_async()
        response = await self._transport.handle_async_request(build_authorized_request(request, access_token))
        if response.status_code != 401:
            return response

        await response.aclose()
        logger.warning("Received 401 Unauthorized, forcing token refresh and retrying once")

        try:
            credentials = await self.credential_manager.refresh_now_async(stale_access_token=access_token)
            access_token = credentials.access
        except (OAuthError, httpx.HTTPError) as e:
            logger.error(f"Failed to refresh token: {e}")
            raise AuthenticationRejectedError(
                f"Authentication failed and token refresh failed: {e}",
                status_code=401,
            ) from e

        response = await self._transport.handle_async_request(build_authorized_request(request, access_token))
        if response.status_code == 401:
            try:
                await response.aread()
                error = _rejected_error(response)
            finally:
                await response.aclose()
            logger.error("Request rejected as unauthorized after token refresh")
            raise error

        return response

    async def aclose(self):
        await self._transport.aclose()
