"""HTTP headers and constants package for codex-auth-chat"""

from .constants import (
    USER_AGENT,
    OPENAI_BETA_HEADER,
    OPENAI_BETA_RESPONSES,
    CHATGPT_ACCOUNT_ID_HEADER,
    CONVERSATION_ID_HEADER,
    SESSION_ID_HEADER,
    SENSITIVE_HEADERS,
    redact_headers,
)

__all__ = [
    "USER_AGENT",
    "OPENAI_BETA_HEADER",
    "OPENAI_BETA_RESPONSES",
    "CHATGPT_ACCOUNT_ID_HEADER",
    "CONVERSATION_ID_HEADER",
    "SESSION_ID_HEADER",
    "SENSITIVE_HEADERS",
    "redact_headers",
]
