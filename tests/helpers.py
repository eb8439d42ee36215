"""Builders for JWTs, event streams and fake HTTP backends used across tests."""

from __future__ import annotations

import base64
import json
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

OPENAI_URL = "https://api.test/v1/responses"
CHATGPT_URL = "https://chatgpt.test/backend-api/codex/responses"
TOKEN_URL = "https://auth.test/oauth/token"


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def make_jwt(payload: Any, header: Optional[Dict[str, Any]] = None) -> str:
    """Build an unsigned-looking three-segment JWT around ``payload``."""
    header = header or {"alg": "RS256", "typ": "JWT"}
    return ".".join([
        b64url(json.dumps(header).encode()),
        b64url(json.dumps(payload).encode()),
        "c2lnbmF0dXJl",
    ])


def make_id_token(account_id: str = "acct-123", **extra: Any) -> str:
    payload = {"https://api.openai.com/auth": {"chatgpt_account_id": account_id}}
    payload.update(extra)
    return make_jwt(payload)


def reply(*texts: str) -> Dict[str, Any]:
    """A Responses API reply with one assistant message of output_text pieces."""
    return {
        "output": [
            {
                "role": "assistant",
                "content": [{"type": "output_text", "text": t} for t in texts],
            }
        ]
    }


def delta(text: str) -> Dict[str, Any]:
    return {"type": "response.output_text.delta", "delta": text}


def completed(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "response.completed", "response": payload}


def sse(events: Iterable[Any], done: bool = True) -> str:
    """Frame events as an event-stream body, one data: line per block."""
    blocks: List[str] = []
    for event in events:
        data = event if isinstance(event, str) else json.dumps(event)
        blocks.append(f"data: {data}")
    if done:
        blocks.append("data: [DONE]")
    return "\n\n".join(blocks) + "\n\n"


class FakeBackend:
    """Routes requests by URL to queued responses and records every request."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._routes: Dict[str, List[Callable[[httpx.Request], httpx.Response]]] = {}

    def queue(self, url: str, status: int = 200, text: str = "", json_body: Any = None) -> "FakeBackend":
        def respond(request: httpx.Request) -> httpx.Response:
            if json_body is not None:
                return httpx.Response(status, json=json_body)
            return httpx.Response(status, text=text)

        self._routes.setdefault(url, []).append(respond)
        return self

    def queue_error(self, url: str, error: type = httpx.ConnectError) -> "FakeBackend":
        def respond(request: httpx.Request) -> httpx.Response:
            raise error("connection refused", request=request)

        self._routes.setdefault(url, []).append(respond)
        return self

    def calls(self, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queued = self._routes.get(str(request.url))
        if not queued:
            raise AssertionError(f"unexpected request to {request.url}")
        return queued.pop(0)(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)
