"""
JWT payload decoding and ChatGPT account ID extraction.

Note: tokens are decoded, never verified. The signature segment is only checked
for presence. A successfully decoded claim says nothing about whether the token
is genuine; the backend is the party that authenticates it.
"""
import base64
import binascii
import json
import logging
import re
from typing import Any, Dict

from .errors import MalformedTokenError, MissingAccountClaimError, TokenDecodeError

logger = logging.getLogger(__name__)

# JWT claim path for ChatGPT account ID
JWT_CLAIM_PATH = "https://api.openai.com/auth"
CHATGPT_ACCOUNT_ID_CLAIM = "chatgpt_account_id"

# JWT segments use base64url without padding
_B64URL_SEGMENT = re.compile(r"[A-Za-z0-9_-]*")


def _b64url_decode(segment: str) -> bytes:
    """Decode an unpadded base64url segment

    Padding and the standard-alphabet ``+`` and ``/`` are rejected.
    """
    if not _B64URL_SEGMENT.fullmatch(segment):
        raise ValueError("segment contains characters outside the unpadded base64url alphabet")
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def decode_jwt_payload(token: str) -> Dict[str, Any]:
    """
    Decode the payload segment of a JWT without verification.

    Args:
        token: JWT string (header.payload.signature)

    Returns:
        Decoded JWT payload as dictionary

    Raises:
        MalformedTokenError: token is not three non-empty dot-separated segments
        TokenDecodeError: payload is not base64url-encoded UTF-8 JSON object
    """
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise MalformedTokenError(len(parts))

    try:
        decoded = _b64url_decode(parts[1])
    except (binascii.Error, ValueError, UnicodeEncodeError) as e:
        raise TokenDecodeError(f"JWT payload is not valid base64url: {e}") from e

    try:
        payload = json.loads(decoded.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TokenDecodeError(f"JWT payload is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise TokenDecodeError(f"JWT payload is a JSON {type(payload).__name__}, expected an object")

    return payload


def extract_chatgpt_account_id(id_token: str) -> str:
    """
    Extract ChatGPT account ID from a JWT identity token.

    The account ID is stored in a custom claim path:
    token[JWT_CLAIM_PATH][CHATGPT_ACCOUNT_ID_CLAIM]

    Args:
        id_token: OAuth ID token (JWT format)

    Returns:
        ChatGPT account ID

    Raises:
        MalformedTokenError, TokenDecodeError: see decode_jwt_payload
        MissingAccountClaimError: claim container or claim is absent
    """
    payload = decode_jwt_payload(id_token)
    claim_path = f"{JWT_CLAIM_PATH}.{CHATGPT_ACCOUNT_ID_CLAIM}"

    claims = payload.get(JWT_CLAIM_PATH)
    if not isinstance(claims, dict):
        logger.error(f"No claims found at path: {JWT_CLAIM_PATH}")
        raise MissingAccountClaimError(claim_path)

    account_id = claims.get(CHATGPT_ACCOUNT_ID_CLAIM)
    if not isinstance(account_id, str) or not account_id:
        logger.error(f"No account ID found in claim: {CHATGPT_ACCOUNT_ID_CLAIM}")
        raise MissingAccountClaimError(claim_path)

    return account_id


def get_token_claims(token: str) -> Dict[str, Any]:
    """
    Get all claims from a JWT for status display and debugging.

    Args:
        token: JWT string

    Returns:
        Full JWT payload
    """
    return decode_jwt_payload(token)
