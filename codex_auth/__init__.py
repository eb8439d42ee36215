"""Codex authentication module

Credential models, identity token decoding, session token refresh and
auth.json loading for the Codex completion client.
"""

from .errors import (
    CodexAuthError,
    TokenError,
    MalformedTokenError,
    TokenDecodeError,
    MissingAccountClaimError,
    DecodeError,
    NoOutputTextError,
    EmptyStreamResultError,
    ResponseDecodeError,
    HttpResponseError,
    UnauthorizedError,
    BackendError,
    RefreshFailedError,
    RefreshRejectedError,
    NoRefreshTokenError,
    TransportError,
    CredentialError,
    CredentialNotFoundError,
    InvalidCredentialError,
    EmptyPromptError,
)
from .models import TokenBundle, ApiKeyCredential, SessionCredential, Credential
from .jwt_utils import (
    JWT_CLAIM_PATH,
    CHATGPT_ACCOUNT_ID_CLAIM,
    decode_jwt_payload,
    extract_chatgpt_account_id,
    get_token_claims,
)
from .token_refresh import build_refresh_request, merge_refreshed_tokens, refresh_session_tokens
from .storage import AuthFileStorage, resolve_auth_file
from .session import new_session_id

__all__ = [
    # Errors
    "CodexAuthError",
    "TokenError",
    "MalformedTokenError",
    "TokenDecodeError",
    "MissingAccountClaimError",
    "DecodeError",
    "NoOutputTextError",
    "EmptyStreamResultError",
    "ResponseDecodeError",
    "HttpResponseError",
    "UnauthorizedError",
    "BackendError",
    "RefreshFailedError",
    "RefreshRejectedError",
    "NoRefreshTokenError",
    "TransportError",
    "CredentialError",
    "CredentialNotFoundError",
    "InvalidCredentialError",
    "EmptyPromptError",
    # Models
    "TokenBundle",
    "ApiKeyCredential",
    "SessionCredential",
    "Credential",
    # JWT Utilities
    "JWT_CLAIM_PATH",
    "CHATGPT_ACCOUNT_ID_CLAIM",
    "decode_jwt_payload",
    "extract_chatgpt_account_id",
    "get_token_claims",
    # Token Refresh
    "build_refresh_request",
    "merge_refreshed_tokens",
    "refresh_session_tokens",
    # Storage
    "AuthFileStorage",
    "resolve_auth_file",
    # Session
    "new_session_id",
]
