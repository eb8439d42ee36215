"""Credential dispatch and the refresh-once retry policy"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

import httpx

from codex_auth import (
    ApiKeyCredential,
    CodexAuthError,
    Credential,
    EmptyPromptError,
    RefreshRejectedError,
    SessionCredential,
    TokenBundle,
    UnauthorizedError,
    refresh_session_tokens,
)
from providers import BaseProvider, ChatGPTProvider, OpenAIProvider

logger = logging.getLogger(__name__)

Refresher = Callable[[TokenBundle], Awaitable[TokenBundle]]


class RetryState(Enum):
    """States of one completion invocation"""
    SENDING = "sending"
    REFRESHING = "refreshing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of a successful completion

    Attributes:
        text: Answer text
        tokens: Session bundle used for the successful request (None for API keys)
        refreshed: True when tokens came from a refresh and should be persisted
    """
    text: str
    tokens: Optional[TokenBundle] = None
    refreshed: bool = False


class CompletionClient:
    """Sends one prompt with either credential type

    Session credentials get at most one refresh per invocation: an
    unauthorized response triggers a refresh and a second attempt, and a
    second unauthorized response is final. API keys are never refreshed.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        instructions: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        openai_endpoint: Optional[str] = None,
        chatgpt_endpoint: Optional[str] = None,
        token_url: Optional[str] = None,
        stream_trace: Optional[bool] = None,
        refresher: Optional[Refresher] = None,
    ):
        """Initialize the client

        Args:
            model: Model identifier (default: settings.CODEX_MODEL)
            instructions: System instructions (default: settings.CODEX_INSTRUCTIONS_FILE, else the bundled Codex prompt)
            transport: Optional httpx transport shared by every request (used by tests)
            openai_endpoint: API-key backend URL override
            chatgpt_endpoint: Session backend URL override
            token_url: Token endpoint override for refresh
            stream_trace: Trace raw event streams (default: settings.STREAM_TRACE_ENABLED)
            refresher: Replacement for the token refresh call
        """
        self.model = model
        self.instructions = instructions
        self.transport = transport
        self.openai_endpoint = openai_endpoint
        self.chatgpt_endpoint = chatgpt_endpoint
        self.token_url = token_url
        self.stream_trace = stream_trace
        self.refresher = refresher or self._refresh

    async def _refresh(self, tokens: TokenBundle) -> TokenBundle:
        return await refresh_session_tokens(tokens, token_url=self.token_url, transport=self.transport)

    def _provider_for(self, credential: Credential) -> BaseProvider:
        """Build the backend provider matching a credential"""
        if isinstance(credential, ApiKeyCredential):
            return OpenAIProvider(
                credential.api_key,
                endpoint=self.openai_endpoint,
                model=self.model,
                instructions=self.instructions,
                transport=self.transport,
            )
        if isinstance(credential, SessionCredential):
            return ChatGPTProvider(
                credential.tokens,
                endpoint=self.chatgpt_endpoint,
                model=self.model,
                instructions=self.instructions,
                transport=self.transport,
                stream_trace=self.stream_trace,
            )
        raise TypeError(f"Unsupported credential type: {type(credential).__name__}")

    async def complete(self, credential: Credential, prompt: str) -> CompletionResult:
        """Send a prompt and return the decoded answer

        Args:
            credential: API key or session tokens
            prompt: User prompt

        Returns:
            CompletionResult with the answer and the bundle that worked

        Raises:
            EmptyPromptError: prompt is blank
            RefreshRejectedError: backend still answers 401 after a refresh
            CodexAuthError: any other terminal failure, unchanged. When a refresh
                succeeded before the failure, the new bundle is on ``tokens``.
        """
        prompt = prompt.strip()
        if not prompt:
            raise EmptyPromptError()

        request_id = uuid.uuid4().hex[:8]
        provider = self._provider_for(credential)
        tokens = credential.tokens if isinstance(credential, SessionCredential) else None
        refreshed = False
        text: Optional[str] = None
        failure: Optional[CodexAuthError] = None

        state = RetryState.SENDING
        while state not in (RetryState.SUCCESS, RetryState.FAILED):
            previous = state

            if state is RetryState.SENDING:
                try:
                    text = await provider.complete(prompt, request_id)
                    state = RetryState.SUCCESS
                except UnauthorizedError as e:
                    if tokens is None:
                        failure = e
                        state = RetryState.FAILED
                    elif refreshed:
                        failure = RefreshRejectedError(e.status, e.body)
                        failure.__cause__ = e
                        state = RetryState.FAILED
                    else:
                        state = RetryState.REFRESHING
                except CodexAuthError as e:
                    failure = e
                    state = RetryState.FAILED

            elif state is RetryState.REFRESHING:
                logger.info(f"[{request_id}] Session token rejected, refreshing")
                try:
                    tokens = await self.refresher(tokens)
                except CodexAuthError as e:
                    failure = e
                    state = RetryState.FAILED
                else:
                    refreshed = True
                    provider = provider.with_tokens(tokens)
                    state = RetryState.SENDING

            logger.debug(f"[{request_id}] {previous.value} -> {state.value}")

        if state is RetryState.FAILED:
            logger.error(f"[{request_id}] Completion failed: {failure.message}")
            if refreshed:
                failure.tokens = tokens
            raise failure

        return CompletionResult(text=text, tokens=tokens, refreshed=refreshed)

    async def complete_text(self, credential: Credential, prompt: str) -> str:
        """Send a prompt and return only the answer text"""
        result = await self.complete(credential, prompt)
        return result.text
