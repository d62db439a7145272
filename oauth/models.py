"""Data models for Claude subscription OAuth tokens and stored credentials"""

import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenResponse(BaseModel):
    """Token endpoint response for both the code exchange and refresh grants"""
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"
    scope: Optional[str] = None


class OAuthCredentials(BaseModel):
    """Stored OAuth credential

    Attributes:
        type: Credential kind, always "oauth"
        access: Bearer access token
        refresh: Refresh token
        expires: Absolute expiry as a Unix timestamp in milliseconds
        scope: Granted OAuth scopes
    """
    model_config = ConfigDict(extra="forbid")

    type: str = Field(default="oauth", pattern="^oauth$")
    access: str
    refresh: str
    expires: int
    scope: Optional[str] = None

    @classmethod
    def from_token_response(cls, token_response: TokenResponse, now_ms: Optional[int] = None) -> "OAuthCredentials":
        """Build a credential, converting relative expiry to an absolute timestamp

        Args:
            token_response: Token endpoint response
            now_ms: Time of receipt in milliseconds (default: now)

        Returns:
            New OAuthCredentials
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return cls(
            access=token_response.access_token,
            refresh=token_response.refresh_token,
            expires=now_ms + token_response.expires_in * 1000,
            scope=token_response.scope,
        )


class AuthData(BaseModel):
    """The on-disk credential document, one slot per provider identity"""
    model_config = ConfigDict(extra="forbid")

    claudesub: Optional[OAuthCredentials] = None
