"""Credential loading from the Codex auth.json file"""

import datetime
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import CredentialNotFoundError, InvalidCredentialError
from .models import ApiKeyCredential, Credential, SessionCredential, TokenBundle


logger = logging.getLogger(__name__)

AUTH_FILE_NAME = "auth.json"
API_KEY_FIELD = "OPENAI_API_KEY"


def resolve_auth_file(
    auth_file: Optional[Path] = None,
    codex_home: Optional[Path] = None,
    default_home: Optional[Path] = None,
) -> Path:
    """Work out which auth.json to read

    Priority: explicit auth_file, then $CODEX_HOME/auth.json, then ~/.codex/auth.json.
    """
    if auth_file is not None:
        return Path(auth_file)
    if codex_home is not None:
        return Path(codex_home) / AUTH_FILE_NAME
    return Path(default_home or Path.home() / ".codex") / AUTH_FILE_NAME


class AuthFileStorage:
    """Reads credentials from auth.json and writes refreshed tokens back"""

    def __init__(self, auth_file: Path):
        """Initialize storage

        Args:
            auth_file: Path to auth.json
        """
        self.auth_file = Path(auth_file)

    def load_raw(self) -> Dict[str, Any]:
        """Load auth.json as a dictionary

        Raises:
            CredentialNotFoundError: file does not exist
            InvalidCredentialError: file is unreadable or not a JSON object
        """
        if not self.auth_file.exists():
            logger.debug(f"No auth file found at {self.auth_file}")
            raise CredentialNotFoundError(self.auth_file)

        try:
            data = json.loads(self.auth_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load {self.auth_file}: {e}")
            raise InvalidCredentialError(f"Failed to parse {self.auth_file}: {e}") from e

        if not isinstance(data, dict):
            raise InvalidCredentialError(f"{self.auth_file} must contain a JSON object")

        logger.debug(f"Loaded credentials from {self.auth_file}")
        return data

    def load_credential(self) -> Credential:
        """Select the credential to use

        A non-blank OPENAI_API_KEY wins. Otherwise the token bundle is used
        when it has an id_token and an access or refresh token.

        Returns:
            ApiKeyCredential or SessionCredential

        Raises:
            InvalidCredentialError: neither credential shape is usable
        """
        data = self.load_raw()

        api_key = data.get(API_KEY_FIELD)
        if isinstance(api_key, str) and api_key.strip():
            logger.debug("Using OPENAI_API_KEY from auth file")
            return ApiKeyCredential(api_key=api_key.strip())

        tokens = self._parse_tokens(data.get("tokens"))
        if tokens is not None and tokens.has_session_material():
            logger.debug("Using ChatGPT session tokens from auth file")
            return SessionCredential(tokens=tokens)

        raise InvalidCredentialError(
            f"{self.auth_file} has neither {API_KEY_FIELD} nor an access/refresh token"
        )

    def _parse_tokens(self, raw: Any) -> Optional[TokenBundle]:
        """Build a TokenBundle from the 'tokens' object, or None if unusable"""
        if not isinstance(raw, dict):
            return None

        id_token = raw.get("id_token")
        if not isinstance(id_token, str) or not id_token.strip():
            return None

        def _optional(name: str) -> Optional[str]:
            value = raw.get(name)
            if isinstance(value, str) and value.strip():
                return value.strip()
            return None

        return TokenBundle(
            id_token=id_token.strip(),
            access_token=_optional("access_token"),
            refresh_token=_optional("refresh_token"),
        )

    def save_tokens(self, tokens: TokenBundle) -> None:
        """Write a refreshed bundle back into auth.json

        Other keys in the file are preserved.

        Raises:
            InvalidCredentialError: existing file cannot be parsed
            OSError: file cannot be written
        """
        data = self.load_raw() if self.auth_file.exists() else {}

        stored = data.get("tokens") if isinstance(data.get("tokens"), dict) else {}
        stored = dict(stored)
        stored["id_token"] = tokens.id_token
        if tokens.access_token:
            stored["access_token"] = tokens.access_token
        if tokens.refresh_token:
            stored["refresh_token"] = tokens.refresh_token

        data["tokens"] = stored
        data["last_refresh"] = (
            datetime.datetime.now(datetime.timezone.utc)
            .isoformat()
            .replace("+00:00", "Z")
        )

        self.auth_file.parent.mkdir(parents=True, exist_ok=True)
        # Write with restrictive permissions
        self.auth_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        self.auth_file.chmod(0o600)
        logger.debug(f"Saved refreshed tokens to {self.auth_file}")
