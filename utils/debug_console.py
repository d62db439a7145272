"""Logging setup and a Rich console that mirrors its output into the debug log.

In debug mode every message printed to the terminal is also written, as plain
text, to the debug log file next to the library's own log records.
"""

import io
import logging
import os
import re
from typing import Optional

from rich.console import Console as RichConsole

ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class DebugCapturingConsole(RichConsole):
    """Rich Console that also logs a plain text copy of everything printed"""

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self._log_prefix = "[CONSOLE] "

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger and self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_to_plain_text(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"{self._log_prefix}{plain_text}")

    def _render_to_plain_text(self, *objects, **kwargs) -> str:
        """Render objects without markup or ANSI codes"""
        buffer = io.StringIO()
        temp_console = RichConsole(
            file=buffer,
            force_terminal=False,
            width=self.width,
            legacy_windows=False
        )
        temp_console.print(*objects, **kwargs)
        return ANSI_ESCAPE.sub('', buffer.getvalue()).rstrip()


def create_console(debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """Create a capturing console when a debug logger is given, a plain one otherwise"""
    if debug_logger:
        return DebugCapturingConsole(debug_logger=debug_logger)
    return RichConsole()


def configure_logging(level: str = "info", debug: bool = False, log_file: str = "claudesub_debug.log") -> Optional[logging.Logger]:
    """Configure the root logger

    Args:
        level: Log level name used when debug is off
        debug: Enable DEBUG level with a file handler appending to log_file
        log_file: Debug log path

    Returns:
        Logger capturing console output in debug mode, None otherwise
    """
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if not debug:
        root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        return None

    root_logger.setLevel(logging.DEBUG)
    log_path = os.path.abspath(log_file)
    file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    console_logger = logging.getLogger("debug_console")
    console_logger.setLevel(logging.DEBUG)
    for handler in console_logger.handlers[:]:
        console_logger.removeHandler(handler)
    capture_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    capture_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    console_logger.addHandler(capture_handler)
    # Console copies go to the file only, never back to the terminal
    console_logger.propagate = False

    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {log_path}")
    return console_logger
