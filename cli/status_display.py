"""Credential status display for the CLI"""

import datetime
from typing import Optional

from rich.table import Table

from codex_auth import (
    ApiKeyCredential,
    Credential,
    SessionCredential,
    TokenError,
    extract_chatgpt_account_id,
    get_token_claims,
)


def _expiry_text(access_token: Optional[str]) -> str:
    """Describe when a JWT access token expires, from its exp claim"""
    if not access_token:
        return "no access token"

    try:
        claims = get_token_claims(access_token)
    except TokenError:
        return "unknown (not a JWT)"

    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return "unknown"

    try:
        expires_at = datetime.datetime.fromtimestamp(float(exp), datetime.timezone.utc)
    except (OverflowError, OSError, ValueError):
        return "unknown"

    delta = expires_at - datetime.datetime.now(datetime.timezone.utc)
    if delta.total_seconds() <= 0:
        return f"expired ({expires_at.isoformat()})"

    hours = int(delta.total_seconds() // 3600)
    minutes = int((delta.total_seconds() % 3600) // 60)
    return f"{hours}h {minutes}m ({expires_at.isoformat()})"


def build_status_table(credential: Credential, auth_file: str) -> Table:
    """
    Build a table describing the loaded credential without contacting any backend

    Args:
        credential: Loaded credential
        auth_file: Path the credential came from

    Returns:
        Rich table
    """
    table = Table(title="Credential Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Auth File", auth_file)

    if isinstance(credential, ApiKeyCredential):
        table.add_row("Credential", "OpenAI API key")
        table.add_row("Backend", "OpenAI Responses API")
        table.add_row("Refresh Possible", "No")
        return table

    if isinstance(credential, SessionCredential):
        tokens = credential.tokens
        try:
            account_id = extract_chatgpt_account_id(tokens.id_token)
        except TokenError as e:
            account_id = f"[red]{e.message}[/red]"

        table.add_row("Credential", "ChatGPT session tokens")
        table.add_row("Backend", "ChatGPT Codex backend")
        table.add_row("Account ID", account_id)
        table.add_row("Access Token", "Yes" if tokens.access_token else "No")
        table.add_row("Access Token Expires", _expiry_text(tokens.access_token))
        table.add_row("Refresh Possible", "Yes" if tokens.refresh_token else "No")
    return table
