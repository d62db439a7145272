"""OAuth authentication package for the Claude subscription API"""

from .pkce import PKCEChallenge, generate_pkce_challenge, create_code_challenge
from .models import TokenResponse, OAuthCredentials, AuthData
from .exceptions import (
    OAuthError,
    OAuthNotInitializedError,
    AuthorizationCodeError,
    InvalidCodeFormatError,
    StateMismatchError,
    TokenEndpointError,
    CredentialsError,
    CredentialsNotFoundError,
    CredentialsStorageError,
    RefreshTokenMissingError,
    TokenRefreshError,
    AuthenticationRejectedError,
)
from .authorization import AuthorizationURLBuilder
from .client import OAuthClient
from .storage import CredentialStore
from .token_manager import CredentialManager

__all__ = [
    "PKCEChallenge",
    "generate_pkce_challenge",
    "create_code_challenge",
    "TokenResponse",
    "OAuthCredentials",
    "AuthData",
    "OAuthError",
    "OAuthNotInitializedError",
    "AuthorizationCodeError",
    "InvalidCodeFormatError",
    "StateMismatchError",
    "TokenEndpointError",
    "CredentialsError",
    "CredentialsNotFoundError",
    "CredentialsStorageError",
    "RefreshTokenMissingError",
    "TokenRefreshError",
    "AuthenticationRejectedError",
    "AuthorizationURLBuilder",
    "OAuthClient",
    "CredentialStore",
    "CredentialManager",
]
