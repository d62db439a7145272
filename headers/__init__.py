"""HTTP headers and constants package for claudesub"""

from .constants import (
    CLAUDE_CODE_SPOOF_MESSAGE,
    OAUTH_BETA_HEADERS,
    API_KEY_HEADERS,
    FINGERPRINT_HEADERS,
    SENSITIVE_HEADERS,
)

__all__ = [
    "CLAUDE_CODE_SPOOF_MESSAGE",
    "OAUTH_BETA_HEADERS",
    "API_KEY_HEADERS",
    "FINGERPRINT_HEADERS",
    "SENSITIVE_HEADERS",
]
