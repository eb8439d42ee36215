"""Completion orchestration for codex-auth-chat"""

from .orchestrator import CompletionClient, CompletionResult, RetryState

__all__ = [
    "CompletionClient",
    "CompletionResult",
    "RetryState",
]
