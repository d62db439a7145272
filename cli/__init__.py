"""CLI package for claudesub

This package provides the command-line interface for signing in to a
Claude Pro/Max subscription and inspecting the stored credentials.
"""

from cli.main import build_parser, main

__all__ = [
    "build_parser",
    "main",
]
