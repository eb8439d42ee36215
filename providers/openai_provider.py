"""
OpenAI Platform provider implementation.
Handles API-key requests to the public Responses API.
"""
import logging
from typing import Optional

import httpx

import settings
from providers.base_provider import BaseProvider
from responses_api import decode_reply_body

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """Provider implementation for the Responses API with a static API key"""

    name = "OpenAI API"
    stream = False

    def __init__(
        self,
        api_key: str,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        instructions: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize OpenAI provider

        Args:
            api_key: OpenAI Platform API key
            endpoint: Responses API URL (default: settings.OPENAI_RESPONSES_URL)
            model, instructions, transport: see BaseProvider
        """
        super().__init__(endpoint or settings.OPENAI_RESPONSES_URL, model, instructions, transport)
        self.api_key = api_key

    @property
    def unauthorized_message(self) -> str:
        return "Authentication rejected. Check OPENAI_API_KEY"

    async def complete(self, prompt: str, request_id: str) -> str:
        """Make a non-streaming request and extract the first output_text

        Args:
            prompt: User prompt
            request_id: Request ID for logging

        Returns:
            Answer text
        """
        payload = self._build_payload(prompt)
        headers = self._base_headers(self.api_key, accept="application/json")
        self._log_request(request_id, payload, headers)

        timeout = httpx.Timeout(settings.REQUEST_TIMEOUT, connect=settings.CONNECT_TIMEOUT)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.RequestError as e:
            raise self._transport_error(e, request_id) from e

        logger.debug(f"[{request_id}] {self.name} response status: {response.status_code}")
        body = response.text
        self._classify(response.status_code, body, request_id)

        return decode_reply_body(body)
