"""Error types for authentication, backend calls and response decoding

Every error carries the context needed to show it to the user verbatim:
HTTP status and raw body for backend failures, the claim path for token
problems, the raw event-stream body for decode failures.
"""

from pathlib import Path
from typing import Optional


class CodexAuthError(Exception):
    """Base exception for codex-auth-chat errors.

    Attributes:
        message: User-presentable description
        tokens: Refreshed session bundle obtained before the failure, if any.
            The caller should persist it, since the old refresh token may
            already be consumed.
    """

    def __init__(self, message: str):
        self.message = message
        self.tokens = None
        super().__init__(message)


# Identity token

class TokenError(CodexAuthError):
    """Raised when the identity token cannot be inspected."""
    pass


class MalformedTokenError(TokenError):
    """Raised when a token is not three non-empty dot-separated segments."""

    def __init__(self, segments: int):
        super().__init__(f"Malformed JWT: expected 3 non-empty segments, got {segments}")
        self.segments = segments


class TokenDecodeError(TokenError):
    """Raised when the JWT payload is not base64url-encoded JSON."""
    pass


class MissingAccountClaimError(TokenError):
    """Raised when the account identifier claim is absent."""

    def __init__(self, claim: str):
        super().__init__(f"Identity token has no '{claim}' claim")
        self.claim = claim


# Response decoding

class DecodeError(CodexAuthError):
    """Raised when a backend reply carries no usable answer."""

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body

    def __str__(self) -> str:
        if self.body is None:
            return self.message
        return f"{self.message}\n--- raw body ---\n{self.body}"


class NoOutputTextError(DecodeError):
    """Raised when a reply has no output_text content piece."""

    def __init__(self, body: Optional[str] = None):
        super().__init__("No output_text found in response", body)


class EmptyStreamResultError(DecodeError):
    """Raised when an event stream yields neither deltas nor a completed reply."""

    def __init__(self, body: Optional[str] = None):
        super().__init__("No text found in streaming response", body)


class ResponseDecodeError(DecodeError):
    """Raised when a reply body is not valid Responses API JSON."""
    pass


# HTTP

class HttpResponseError(CodexAuthError):
    """Raised for a classified non-2xx HTTP response."""

    def __init__(self, message: str, status: int, body: str):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        return f"{self.message} (status: {self.status}): {self.body}"


class UnauthorizedError(HttpResponseError):
    """Raised when a backend answers 401."""

    def __init__(self, message: str, body: str = "", status: int = 401):
        super().__init__(message, status, body)


class BackendError(HttpResponseError):
    """Raised when a backend answers any other non-2xx status."""

    def __init__(self, status: int, body: str, backend: str = "backend"):
        super().__init__(f"{backend} request failed", status, body)
        self.backend = backend


class RefreshFailedError(HttpResponseError):
    """Raised when the token endpoint rejects a refresh or returns garbage."""

    def __init__(self, status: int, body: str, message: str = "Token refresh failed"):
        super().__init__(message, status, body)


class RefreshRejectedError(HttpResponseError):
    """Raised when refreshed credentials are still rejected by the backend."""

    def __init__(self, status: int = 401, body: str = ""):
        super().__init__("Refreshed credentials still rejected; run `codex login` again", status, body)


class NoRefreshTokenError(CodexAuthError):
    """Raised when a refresh is needed but the bundle has no refresh token."""

    def __init__(self):
        super().__init__("Session token rejected and no refresh token available; run `codex login` again")


class TransportError(CodexAuthError):
    """Raised when a request never produced an HTTP response."""

    def __init__(self, endpoint: str, reason: str):
        super().__init__(f"Request to {endpoint} failed: {reason}")
        self.endpoint = endpoint
        self.reason = reason


# Credentials and input

class CredentialError(CodexAuthError):
    """Raised when no usable credential can be loaded."""
    pass


class CredentialNotFoundError(CredentialError):
    """Raised when the auth file does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"{path} not found. Run `codex login` and try again.")
        self.path = path


class InvalidCredentialError(CredentialError):
    """Raised when the auth file cannot be parsed or holds no usable credential."""
    pass


class EmptyPromptError(CodexAuthError):
    """Raised when the prompt is empty after trimming."""

    def __init__(self):
        super().__init__("Prompt is empty")
