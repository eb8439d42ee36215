"""Session identifiers for the ChatGPT Codex backend"""

import uuid


def new_session_id() -> str:
    """Generate a fresh conversation/session ID (random UUID4)"""
    return str(uuid.uuid4())
