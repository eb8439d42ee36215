"""Shared utilities package for codex-auth-chat"""

from .debug_console import (
    DebugCapturingConsole,
    create_debug_console,
    setup_debug_logger,
    configure_logging,
    configure_debug_logging,
)

__all__ = [
    "DebugCapturingConsole",
    "create_debug_console",
    "setup_debug_logger",
    "configure_logging",
    "configure_debug_logging",
]
