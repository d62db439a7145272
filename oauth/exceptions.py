"""Exception hierarchy for the OAuth flow, credential storage and transport

Every failure path raises one of these (or an httpx network exception) with
the underlying cause chained via ``from``.
"""

from typing import Optional


class OAuthError(Exception):
    """Base exception for all OAuth and credential errors"""


# Configuration / programmer errors


class OAuthNotInitializedError(OAuthError):
    """An operation was invoked out of order (e.g. exchange before URL generation)"""

    def __init__(self, message: str = "PKCE challenge not initialized - call get_authorize_url() first"):
        super().__init__(message)


# Format / validation errors


class AuthorizationCodeError(OAuthError):
    """The pasted authorization code was rejected before any network call.

    The login attempt must restart from authorization URL generation.
    """


class InvalidCodeFormatError(AuthorizationCodeError):
    """Authorization code is not of the form ``code#state``"""


class StateMismatchError(AuthorizationCodeError):
    """Returned state does not match the one sent with the authorization URL"""

    def __init__(self, message: str = "State mismatch - possible CSRF attack"):
        super().__init__(message)


# Upstream rejection


class TokenEndpointError(OAuthError):
    """Token endpoint returned a non-200 status or an unusable body"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


# Storage errors


class CredentialsError(OAuthError):
    """Base exception for stored credential problems"""


class CredentialsNotFoundError(CredentialsError):
    """No credential is stored - the user has never logged in or has logged out"""

    def __init__(self, message: str = "No claudesub credentials found - run 'auth login' first"):
        super().__init__(message)


class CredentialsStorageError(CredentialsError):
    """Credential document exists but cannot be read, parsed or written"""


class RefreshTokenMissingError(CredentialsError):
    """Stored credential has no refresh token; re-authentication is required"""

    def __init__(self, message: str = "No refresh token available - please login again"):
        super().__init__(message)


# Refresh / transport errors


class TokenRefreshError(OAuthError):
    """Refreshing the access token failed"""


class AuthenticationRejectedError(OAuthError):
    """The API rejected the request after the single forced refresh and retry.

    Terminal: the caller must re-authenticate.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
