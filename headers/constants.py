"""HTTP request header names and values for the Responses backends"""

# User-Agent string for all outbound requests
USER_AGENT = "codex-simple-chatgpt-test/0.1"

# Opt-in header required by the ChatGPT Codex backend
OPENAI_BETA_HEADER = "OpenAI-Beta"
OPENAI_BETA_RESPONSES = "responses=experimental"

# Session backend identity headers
CHATGPT_ACCOUNT_ID_HEADER = "chatgpt-account-id"
CONVERSATION_ID_HEADER = "conversation_id"
SESSION_ID_HEADER = "session_id"

# Headers whose values must never reach a log line
SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key", "api-key", CHATGPT_ACCOUNT_ID_HEADER})


def redact_headers(headers: dict) -> dict:
    """Return a copy of ``headers`` safe for debug logging"""
    return {
        name: "[REDACTED]" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }
