from pathlib import Path
from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "warning")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "codex_chat_debug.log")

# Model configuration
CODEX_MODEL = config.get("CODEX_MODEL", "gpt-5-codex")

# Optional override for the instructions sent with every request.
# Unset means the Codex prompt bundled in responses_api/prompts/gpt5_codex.md
CODEX_INSTRUCTIONS_FILE = config.get_path("CODEX_INSTRUCTIONS_FILE", None)

# Backend endpoints (hardcoded - not user configurable)
# API key auth goes to the public Responses API, session tokens go to the ChatGPT Codex backend
OPENAI_RESPONSES_URL = "https://api.openai.com/v1/responses"
CHATGPT_RESPONSES_URL = "https://chatgpt.com/backend-api/codex/responses"

# ChatGPT OAuth configuration (hardcoded - not user configurable)
CHATGPT_CLIENT_ID = "app_EMoamEEZ73f0CkXaXp7hrann"
CHATGPT_OAUTH_ISSUER = "https://auth.openai.com"
CHATGPT_TOKEN_URL = f"{CHATGPT_OAUTH_ISSUER}/oauth/token"
CHATGPT_REFRESH_SCOPE = "openid profile email"

# Credential file (auth.json written by `codex login`)
# $CODEX_HOME/auth.json when CODEX_HOME is set, ~/.codex/auth.json otherwise
CODEX_HOME = config.get_path("CODEX_HOME", None)
AUTH_FILE = config.get_path("CODEX_AUTH_FILE", None)
DEFAULT_CODEX_HOME = Path.home() / ".codex"

# Timeout configuration
# Connection timeout: Time to establish TCP connection
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
# Read timeout: Time between receiving data chunks, important for detecting stalled streams
READ_TIMEOUT = config.get("READ_TIMEOUT", 60.0)
# Request timeout: Total timeout for non-streaming requests and token refresh
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 120.0)
# Stream timeout: Total timeout for the streaming session backend
STREAM_TIMEOUT = config.get("STREAM_TIMEOUT", 600.0)

# Stream tracing / debugging
STREAM_TRACE_ENABLED = config.get("STREAM_TRACE_ENABLED", False)
STREAM_TRACE_DIR = config.get("STREAM_TRACE_DIR", "stream_traces")
STREAM_TRACE_MAX_BYTES = config.get("STREAM_TRACE_MAX_BYTES", 262144)
