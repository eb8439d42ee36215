"""
Base provider interface for the Responses API backends.
Defines the request/classification contract both backends follow.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

import settings
from codex_auth.errors import BackendError, TransportError, UnauthorizedError
from headers import USER_AGENT, redact_headers
from responses_api import build_chat_request, load_codex_instructions

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for Responses API backends"""

    #: Human-readable backend name used in errors and logs
    name = "backend"
    #: Whether requests ask for an event stream
    stream = False

    def __init__(
        self,
        endpoint: str,
        model: Optional[str] = None,
        instructions: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize provider with endpoint and request settings

        Args:
            endpoint: Full Responses API URL
            model: Model identifier (default: settings.CODEX_MODEL)
            instructions: System instructions (default: settings.CODEX_INSTRUCTIONS_FILE, else the bundled Codex prompt)
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint = endpoint
        self.model = model or settings.CODEX_MODEL
        self.instructions = instructions or load_codex_instructions(settings.CODEX_INSTRUCTIONS_FILE)
        self.transport = transport

    def _build_payload(self, prompt: str) -> Dict[str, Any]:
        """Build the Responses API request body for a prompt"""
        request = build_chat_request(prompt, self.model, self.instructions, stream=self.stream)
        return request.model_dump()

    def _base_headers(self, bearer_token: str, accept: str) -> Dict[str, str]:
        """Headers shared by both backends"""
        return {
            "Authorization": f"Bearer {bearer_token}",
            "Content-Type": "application/json",
            "Accept": accept,
            "User-Agent": USER_AGENT,
        }

    def _log_request(self, request_id: str, payload: Dict[str, Any], headers: Dict[str, str]) -> None:
        logger.debug(f"[{request_id}] Making {self.name} request to {self.endpoint}")
        logger.debug(f"[{request_id}] Request headers: {redact_headers(headers)}")
        logger.debug(f"[{request_id}] Request payload: {json.dumps(payload, indent=2)}")

    def _classify(self, status_code: int, body: str, request_id: str) -> None:
        """Raise the error matching a non-2xx status; return for success

        Raises:
            UnauthorizedError: status 401
            BackendError: any other non-2xx status
        """
        if 200 <= status_code < 300:
            return

        logger.error(f"[{request_id}] {self.name} error {status_code}: {body}")
        if status_code == httpx.codes.UNAUTHORIZED:
            raise UnauthorizedError(self.unauthorized_message, body)
        raise BackendError(status_code, body, self.name)

    def _transport_error(self, error: httpx.RequestError, request_id: str) -> TransportError:
        logger.error(f"[{request_id}] {self.name} request failed: {error!r}")
        return TransportError(self.endpoint, str(error) or type(error).__name__)

    @property
    @abstractmethod
    def unauthorized_message(self) -> str:
        """Message for a 401 from this backend"""
        pass

    @abstractmethod
    async def complete(self, prompt: str, request_id: str) -> str:
        """Send one prompt and decode the answer text

        Args:
            prompt: User prompt
            request_id: Request ID for logging

        Returns:
            Answer text

        Raises:
            UnauthorizedError, BackendError, TransportError, DecodeError
        """
        pass
