"""Logging setup for codex-chat and a Rich console that mirrors output to the debug log.

Normal runs log to stderr at the configured level. With ``--debug`` every
module logger writes to the debug log file and stderr at DEBUG, and whatever
the CLI prints through the console is copied into the same file as plain text.
"""

import io
import logging
import os
import re
from typing import Optional

from rich.console import Console as RichConsole

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_LOGGER = "debug_console"
ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


class DebugCapturingConsole(RichConsole):
    """Rich Console whose printed output is also logged as plain text."""

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger is None or not self.debug_logger.isEnabledFor(logging.DEBUG):
            return
        plain_text = self.plain_text(*objects, **kwargs)
        if plain_text.strip():
            self.debug_logger.debug(f"[CONSOLE] {plain_text}")

    def plain_text(self, *objects, **kwargs) -> str:
        """Render ``objects`` the way print would, minus markup and colour"""
        buffer = io.StringIO()
        RichConsole(file=buffer, force_terminal=False, width=self.width, legacy_windows=False).print(*objects, **kwargs)
        return ANSI_ESCAPE.sub('', buffer.getvalue()).rstrip()


def create_debug_console(debug_enabled: bool = False,
                         debug_logger: Optional[logging.Logger] = None,
                         **console_kwargs) -> RichConsole:
    """
    Create the console for this run.

    Args:
        debug_enabled: Whether --debug was given
        debug_logger: Logger receiving captured console output
        **console_kwargs: Passed through to the Rich console

    Returns:
        DebugCapturingConsole in debug mode, a plain Rich console otherwise
    """
    if debug_enabled and debug_logger:
        return DebugCapturingConsole(debug_logger, **console_kwargs)
    return RichConsole(**console_kwargs)


def setup_debug_logger(log_file: str) -> logging.Logger:
    """
    Logger for console capture, writing only to ``log_file``.

    Args:
        log_file: Path to debug log file (appended to)

    Returns:
        Configured logger that does not propagate to the root logger
    """
    capture = logging.getLogger(CONSOLE_LOGGER)
    capture.setLevel(logging.DEBUG)
    capture.propagate = False

    for handler in capture.handlers[:]:
        capture.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    capture.addHandler(handler)
    return capture


def configure_logging(level: str = "warning") -> None:
    """Configure the root logger for a normal run.

    Args:
        level: Level name such as "info" or "warning"; unknown names mean warning
    """
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format=LOG_FORMAT)


def configure_debug_logging(log_file: str) -> logging.Logger:
    """Send every module logger to ``log_file`` and stderr at DEBUG.

    Args:
        log_file: Path to debug log file (appended to)

    Returns:
        Logger for console capture, writing to the same file
    """
    log_file = os.path.abspath(log_file)
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in (logging.FileHandler(log_file, mode='a', encoding='utf-8'), logging.StreamHandler()):
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {log_file}")
    return setup_debug_logger(log_file)
