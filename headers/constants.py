"""HTTP Request Headers and Spoofing Constants

OAuth traffic is only accepted by the Anthropic API when it looks like it
comes from the official Claude CLI
"""

from typing import Tuple

# Message for system prompts when spoofing Claude Code
CLAUDE_CODE_SPOOF_MESSAGE = "You are Claude Code, Anthropic's official CLI for Claude."

# Fixed capability flags sent with every OAuth-authenticated request
OAUTH_BETA_HEADERS = (
    "oauth-2025-04-20,"
    "claude-code-20250219,"
    "interleaved-thinking-2025-05-14,"
    "fine-grained-tool-streaming-2025-05-14"
)

# Static API key headers replaced by the Bearer token
API_KEY_HEADERS: Tuple[str, ...] = (
    "x-api-key",
)

# Headers that fingerprint the SDK/runtime making the request
FINGERPRINT_HEADERS: Tuple[str, ...] = (
    "User-Agent",
    "X-Stainless-OS",
    "X-Stainless-Lang",
    "X-Stainless-Retry-Count",
    "X-Stainless-Arch",
    "X-Stainless-Runtime",
    "X-Stainless-Runtime-Version",
    "X-Stainless-Package-Version",
)

# Headers never written to debug logs in clear text
SENSITIVE_HEADERS: Tuple[str, ...] = (
    "authorization",
    "x-api-key",
)
