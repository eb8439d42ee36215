"""CLI package for codex-auth-chat

A thin shell around the completion client: loads auth.json, reads a prompt,
prints the answer and saves refreshed tokens.
"""

from cli.main import build_parser, main

__all__ = [
    "build_parser",
    "main",
]
