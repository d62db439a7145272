"""Claude Code system prefix for OAuth requests"""

import logging
from typing import Any, Dict, List, Union

from headers import CLAUDE_CODE_SPOOF_MESSAGE

logger = logging.getLogger(__name__)

SystemPrompt = Union[str, List[Dict[str, Any]], None]


def _has_prefix(system: SystemPrompt) -> bool:
    if isinstance(system, str):
        return system.startswith(CLAUDE_CODE_SPOOF_MESSAGE)
    return bool(system) and system[0].get("text") == CLAUDE_CODE_SPOOF_MESSAGE


def inject_claude_code_system_message(params: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of Messages API params whose system prompt starts with the Claude Code prefix

    Subscription tokens are only accepted for such requests. A string system
    prompt becomes a text block after the prefix; block lists keep their
    blocks (and any cache_control) unchanged.
    """
    system: SystemPrompt = params.get("system")
    if _has_prefix(system):
        return dict(params)

    blocks = [{"type": "text", "text": CLAUDE_CODE_SPOOF_MESSAGE}]
    if isinstance(system, str):
        blocks.append({"type": "text", "text": system})
    elif system:
        blocks.extend(system)

    logger.debug(f"Prefixed system prompt ({len(blocks)} blocks)")
    return {**params, "system": blocks}
