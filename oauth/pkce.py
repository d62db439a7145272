"""PKCE (Proof Key for Code Exchange) generation"""

import base64
import hashlib
import secrets
from dataclasses import dataclass

# Unreserved URL characters allowed in a code verifier (RFC 7636 section 4.1)
VERIFIER_CHARSET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
VERIFIER_LENGTH = 64
MIN_VERIFIER_LENGTH = 43
MAX_VERIFIER_LENGTH = 128


@dataclass(frozen=True)
class PKCEChallenge:
    """PKCE codes for a single authorization attempt

    Held in memory only for the duration of that attempt, never persisted.

    Attributes:
        verifier: Random secret sent to the token endpoint
        challenge: SHA256 hash of verifier, sent in the authorization URL
        method: Challenge derivation method, always S256
    """
    verifier: str
    challenge: str
    method: str = "S256"


def create_code_challenge(verifier: str) -> str:
    """Derive the S256 challenge from a verifier

    Args:
        verifier: PKCE code verifier

    Returns:
        Base64url encoded SHA256 digest without padding
    """
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("utf-8").rstrip("=")


def generate_code_verifier(length: int = VERIFIER_LENGTH) -> str:
    """Generate a cryptographically random code verifier

    Args:
        length: Verifier length, 43-128 characters

    Returns:
        Verifier drawn from the unreserved URL character set

    Raises:
        ValueError: If length is outside the range PKCE allows
    """
    if not MIN_VERIFIER_LENGTH <= length <= MAX_VERIFIER_LENGTH:
        raise ValueError(
            f"Code verifier length must be between {MIN_VERIFIER_LENGTH} and "
            f"{MAX_VERIFIER_LENGTH}, got {length}"
        )

    random_bytes = secrets.token_bytes(length)
    return "".join(VERIFIER_CHARSET[b % len(VERIFIER_CHARSET)] for b in random_bytes)


def generate_pkce_challenge(length: int = VERIFIER_LENGTH) -> PKCEChallenge:
    """Generate a PKCE verifier and its S256 challenge

    Args:
        length: Verifier length, 43-128 characters

    Returns:
        New PKCEChallenge
    """
    verifier = generate_code_verifier(length)
    return PKCEChallenge(verifier=verifier, challenge=create_code_challenge(verifier))
