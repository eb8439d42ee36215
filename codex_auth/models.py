"""Data models for Codex credentials"""

from dataclasses import dataclass, replace
from typing import Optional, Union


@dataclass(frozen=True)
class TokenBundle:
    """OAuth session material from ChatGPT authentication

    Attributes:
        id_token: JWT ID token carrying the ChatGPT account claim
        access_token: Bearer token for the session backend
        refresh_token: Token for refreshing a rejected access token
    """
    id_token: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    def has_session_material(self) -> bool:
        """True when the bundle can authenticate, now or after a refresh"""
        return bool(_clean(self.access_token) or _clean(self.refresh_token))

    def with_updates(self, **changes) -> "TokenBundle":
        """Return a copy with the given fields replaced"""
        return replace(self, **changes)

    def __repr__(self) -> str:
        # Tokens are secrets; show presence only
        return (
            f"TokenBundle(id_token={'set' if self.id_token else 'unset'}, "
            f"access_token={'set' if _clean(self.access_token) else 'unset'}, "
            f"refresh_token={'set' if _clean(self.refresh_token) else 'unset'})"
        )


@dataclass(frozen=True)
class ApiKeyCredential:
    """Static OpenAI Platform API key"""
    api_key: str

    def __repr__(self) -> str:
        return "ApiKeyCredential(api_key=[REDACTED])"


@dataclass(frozen=True)
class SessionCredential:
    """ChatGPT session tokens"""
    tokens: TokenBundle


Credential = Union[ApiKeyCredential, SessionCredential]


def _clean(value: Optional[str]) -> Optional[str]:
    """Strip a token, mapping blank strings to None"""
    if value is None:
        return None
    value = value.strip()
    return value or None
