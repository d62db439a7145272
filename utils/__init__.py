"""Shared utilities package for claudesub"""

from .rwlock import ReadWriteLock, get_document_lock
from .debug_console import (
    DebugCapturingConsole,
    configure_logging,
    create_console,
)

__all__ = [
    "ReadWriteLock",
    "get_document_lock",
    "DebugCapturingConsole",
    "configure_logging",
    "create_console",
]
