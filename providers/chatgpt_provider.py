"""
ChatGPT provider implementation for the Codex Responses backend.
Handles streaming requests authenticated with ChatGPT session tokens.
"""
import logging
from typing import Dict, Optional

import httpx

import settings
from codex_auth import TokenBundle, UnauthorizedError, extract_chatgpt_account_id, new_session_id
from headers import (
    CHATGPT_ACCOUNT_ID_HEADER,
    CONVERSATION_ID_HEADER,
    OPENAI_BETA_HEADER,
    OPENAI_BETA_RESPONSES,
    SESSION_ID_HEADER,
)
from providers.base_provider import BaseProvider
from responses_api import decode_event_stream
from stream_debug import StreamTracer, maybe_create_stream_tracer

logger = logging.getLogger(__name__)


class ChatGPTProvider(BaseProvider):
    """Provider implementation for the ChatGPT Codex backend

    A provider is bound to one token bundle. After a refresh, build a new
    one with ``with_tokens`` rather than mutating this instance.
    """

    name = "ChatGPT backend"
    stream = True

    def __init__(
        self,
        tokens: TokenBundle,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        instructions: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        stream_trace: Optional[bool] = None,
    ):
        """Initialize ChatGPT provider

        Args:
            tokens: Session token bundle
            endpoint: Codex responses URL (default: settings.CHATGPT_RESPONSES_URL)
            model, instructions, transport: see BaseProvider
            stream_trace: Write raw event streams to disk (default: settings.STREAM_TRACE_ENABLED)
        """
        super().__init__(endpoint or settings.CHATGPT_RESPONSES_URL, model, instructions, transport)
        self.tokens = tokens
        self.stream_trace = settings.STREAM_TRACE_ENABLED if stream_trace is None else stream_trace

    def with_tokens(self, tokens: TokenBundle) -> "ChatGPTProvider":
        """Return a provider with the same settings bound to another bundle"""
        return ChatGPTProvider(
            tokens,
            endpoint=self.endpoint,
            model=self.model,
            instructions=self.instructions,
            transport=self.transport,
            stream_trace=self.stream_trace,
        )

    @property
    def unauthorized_message(self) -> str:
        return "ChatGPT token expired or invalid"

    def _get_headers(self, access_token: str, account_id: str, session_id: str) -> Dict[str, str]:
        """Build request headers for the Codex backend

        Args:
            access_token: OAuth access token
            account_id: ChatGPT account ID from the identity token
            session_id: Fresh ID sent as both conversation and session ID

        Returns:
            Dictionary of HTTP headers
        """
        headers = self._base_headers(access_token, accept="text/event-stream")
        headers.update({
            OPENAI_BETA_HEADER: OPENAI_BETA_RESPONSES,
            CHATGPT_ACCOUNT_ID_HEADER: account_id,
            CONVERSATION_ID_HEADER: session_id,
            SESSION_ID_HEADER: session_id,
        })
        return headers

    async def complete(self, prompt: str, request_id: str) -> str:
        """Stream a response from the Codex backend and fold it into text

        Args:
            prompt: User prompt
            request_id: Request ID for logging

        Returns:
            Answer text

        Raises:
            UnauthorizedError: no access token, or the backend answered 401
            TokenError: the identity token carries no usable account claim
        """
        access_token = (self.tokens.access_token or "").strip()
        if not access_token:
            logger.info(f"[{request_id}] No access token in bundle, a refresh is required")
            raise UnauthorizedError("No ChatGPT access token available")

        account_id = extract_chatgpt_account_id(self.tokens.id_token)
        session_id = new_session_id()

        payload = self._build_payload(prompt)
        headers = self._get_headers(access_token, account_id, session_id)
        self._log_request(request_id, payload, headers)

        tracer = maybe_create_stream_tracer(
            self.stream_trace,
            request_id=request_id,
            route="codex-responses",
            base_dir=settings.STREAM_TRACE_DIR,
            max_bytes=settings.STREAM_TRACE_MAX_BYTES,
        )
        if tracer is None:
            return await self._stream(payload, headers, request_id, None)
        with tracer:
            tracer.log_request(self.endpoint, self.model, session_id)
            return await self._stream(payload, headers, request_id, tracer)

    async def _stream(
        self,
        payload: Dict,
        headers: Dict[str, str],
        request_id: str,
        tracer: Optional[StreamTracer],
    ) -> str:
        timeout = httpx.Timeout(
            settings.STREAM_TIMEOUT,
            connect=settings.CONNECT_TIMEOUT,
            read=settings.READ_TIMEOUT,
        )
        chunks = []
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                async with client.stream("POST", self.endpoint, json=payload, headers=headers) as response:
                    status_code = response.status_code
                    if tracer:
                        tracer.log_status(status_code)

                    async for chunk in response.aiter_text():
                        chunks.append(chunk)
        except httpx.RequestError as e:
            raise self._transport_error(e, request_id) from e

        body = "".join(chunks)
        logger.debug(f"[{request_id}] {self.name} response status: {status_code}, {len(body)} chars")
        if tracer:
            tracer.log_body(body)

        self._classify(status_code, body, request_id)
        return decode_event_stream(body)
