"""OAuth token refresh for ChatGPT session tokens"""

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from settings import (
    CHATGPT_CLIENT_ID,
    CHATGPT_REFRESH_SCOPE,
    CHATGPT_TOKEN_URL,
    CONNECT_TIMEOUT,
    REQUEST_TIMEOUT,
)
from headers import USER_AGENT
from .errors import NoRefreshTokenError, RefreshFailedError, TransportError
from .models import TokenBundle


logger = logging.getLogger(__name__)


def build_refresh_request(refresh_token: str) -> Dict[str, str]:
    """Build the token endpoint form body for a refresh_token grant"""
    return {
        "client_id": CHATGPT_CLIENT_ID,
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "scope": CHATGPT_REFRESH_SCOPE,
    }


def _optional_token(payload: Dict[str, Any], name: str, fallback: Optional[str], status: int, body: str) -> Optional[str]:
    """Read an optional string token, keeping ``fallback`` when omitted or empty"""
    value = payload.get(name)
    if value is None or value == "":
        return fallback
    if not isinstance(value, str):
        raise RefreshFailedError(status, body, f"Token refresh response has a non-string {name}")
    return value


def merge_refreshed_tokens(
    previous: TokenBundle,
    payload: Dict[str, Any],
    status: int = 200,
    body: Optional[str] = None,
) -> TokenBundle:
    """Merge a token endpoint response into a new bundle

    The new id_token always replaces the old one. access_token and
    refresh_token keep their previous values when the response omits them,
    since the endpoint is not required to rotate every field.

    Args:
        previous: Bundle the refresh was made with
        payload: Parsed token endpoint response
        status: HTTP status of the token response, for error reporting
        body: Raw token response body, for error reporting (default: payload re-encoded)

    Returns:
        New TokenBundle

    Raises:
        RefreshFailedError: id_token is missing, or a token field is not a string
    """
    if body is None:
        body = json.dumps(payload)

    id_token = payload.get("id_token")
    if not isinstance(id_token, str) or not id_token:
        raise RefreshFailedError(status, body, "Token refresh response missing id_token")

    return TokenBundle(
        id_token=id_token,
        access_token=_optional_token(payload, "access_token", previous.access_token, status, body),
        refresh_token=_optional_token(payload, "refresh_token", previous.refresh_token, status, body),
    )


async def refresh_session_tokens(
    tokens: TokenBundle,
    token_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TokenBundle:
    """Exchange the bundle's refresh token for a new token bundle

    Args:
        tokens: Current session tokens
        token_url: Token endpoint override (default: settings.CHATGPT_TOKEN_URL)
        transport: Optional httpx transport (used by tests)

    Returns:
        Refreshed TokenBundle

    Raises:
        NoRefreshTokenError: bundle has no refresh token
        RefreshFailedError: token endpoint answered non-2xx or an unusable body
        TransportError: the request never got a response
    """
    refresh_token = (tokens.refresh_token or "").strip()
    if not refresh_token:
        logger.error("No refresh token provided")
        raise NoRefreshTokenError()

    endpoint = token_url or CHATGPT_TOKEN_URL
    data = build_refresh_request(refresh_token)

    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
            transport=transport,
        ) as client:
            response = await client.post(
                endpoint,
                content=urlencode(data),
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "User-Agent": USER_AGENT,
                },
            )
    except httpx.RequestError as e:
        logger.error(f"Token refresh request failed: {e}")
        raise TransportError(endpoint, str(e) or type(e).__name__) from e

    if not response.is_success:
        logger.error(f"Token refresh failed with status {response.status_code}: {response.text}")
        raise RefreshFailedError(response.status_code, response.text)

    try:
        payload = response.json()
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse token refresh response: {e}")
        raise RefreshFailedError(response.status_code, response.text, "Token refresh response is not JSON") from e

    if not isinstance(payload, dict):
        raise RefreshFailedError(response.status_code, response.text, "Token refresh response is not a JSON object")

    refreshed = merge_refreshed_tokens(tokens, payload, response.status_code, response.text)
    logger.info("Successfully refreshed ChatGPT OAuth tokens")
    return refreshed
