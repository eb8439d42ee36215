"""Tests for credential dispatch and the refresh-once retry policy."""

import json

import pytest

from codex_auth import (
    ApiKeyCredential,
    BackendError,
    EmptyPromptError,
    NoRefreshTokenError,
    RefreshFailedError,
    RefreshRejectedError,
    SessionCredential,
    TokenBundle,
    UnauthorizedError,
)
from completion import CompletionClient
from helpers import CHATGPT_URL, OPENAI_URL, TOKEN_URL, delta, make_id_token, reply, sse


def make_client(backend, **kwargs):
    return CompletionClient(
        model="gpt-5-codex",
        instructions="be brief",
        transport=backend.transport,
        openai_endpoint=OPENAI_URL,
        chatgpt_endpoint=CHATGPT_URL,
        token_url=TOKEN_URL,
        stream_trace=False,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_api_key_success(backend):
    backend.queue(OPENAI_URL, json_body=reply("from api"))

    result = await make_client(backend).complete(ApiKeyCredential("sk-test"), "  hi  ")

    assert result.text == "from api"
    assert result.tokens is None
    assert result.refreshed is False
    assert backend.calls(CHATGPT_URL) == []


@pytest.mark.asyncio
async def test_api_key_unauthorized_never_refreshes(backend):
    backend.queue(OPENAI_URL, status=401, text="bad key")

    with pytest.raises(UnauthorizedError):
        await make_client(backend).complete(ApiKeyCredential("sk-test"), "hi")

    assert len(backend.requests) == 1
    assert backend.calls(TOKEN_URL) == []


@pytest.mark.asyncio
async def test_session_success_without_refresh(backend, tokens):
    backend.queue(CHATGPT_URL, text=sse([delta("streamed")]))

    result = await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert result.text == "streamed"
    assert result.tokens == tokens
    assert result.refreshed is False


@pytest.mark.asyncio
async def test_refresh_once_then_succeed(backend, tokens):
    new_id = make_id_token("acct-123", rotated=True)
    backend.queue(CHATGPT_URL, status=401, text="expired")
    backend.queue(TOKEN_URL, json_body={"id_token": new_id, "access_token": "access-new"})
    backend.queue(CHATGPT_URL, text=sse([delta("after refresh")]))

    result = await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert result.text == "after refresh"
    assert result.refreshed is True
    assert result.tokens == TokenBundle(id_token=new_id, access_token="access-new", refresh_token="refresh-old")

    first, second = backend.calls(CHATGPT_URL)
    assert first.headers["authorization"] == "Bearer access-old"
    assert second.headers["authorization"] == "Bearer access-new"
    assert len(backend.calls(TOKEN_URL)) == 1


@pytest.mark.asyncio
async def test_second_unauthorized_is_final(backend, tokens):
    backend.queue(CHATGPT_URL, status=401, text="expired")
    backend.queue(TOKEN_URL, json_body={"id_token": tokens.id_token, "access_token": "access-new"})
    backend.queue(CHATGPT_URL, status=401, text="still expired")

    with pytest.raises(RefreshRejectedError) as exc_info:
        await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert exc_info.value.status == 401
    assert exc_info.value.body == "still expired"
    assert isinstance(exc_info.value.__cause__, UnauthorizedError)
    assert len(backend.calls(CHATGPT_URL)) == 2
    assert len(backend.calls(TOKEN_URL)) == 1


@pytest.mark.asyncio
async def test_injected_refresher_called_once(backend, tokens):
    calls = []

    async def refresher(bundle):
        calls.append(bundle)
        return bundle.with_updates(access_token="access-new")

    backend.queue(CHATGPT_URL, status=401, text="expired")
    backend.queue(CHATGPT_URL, text=sse([delta("ok")]))

    result = await make_client(backend, refresher=refresher).complete(SessionCredential(tokens), "hi")

    assert result.text == "ok"
    assert calls == [tokens]


@pytest.mark.asyncio
async def test_missing_access_token_refreshes_first(backend, id_token):
    tokens = TokenBundle(id_token=id_token, access_token=None, refresh_token="refresh-old")
    backend.queue(TOKEN_URL, json_body={"id_token": id_token, "access_token": "access-new"})
    backend.queue(CHATGPT_URL, text=sse([delta("ok")]))

    result = await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert result.text == "ok"
    assert result.refreshed is True
    assert [str(r.url) for r in backend.requests] == [TOKEN_URL, CHATGPT_URL]


@pytest.mark.asyncio
async def test_unauthorized_without_refresh_token(backend, id_token):
    tokens = TokenBundle(id_token=id_token, access_token="access-old")
    backend.queue(CHATGPT_URL, status=401, text="expired")

    with pytest.raises(NoRefreshTokenError):
        await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert len(backend.requests) == 1


@pytest.mark.asyncio
async def test_refresh_failure_is_propagated(backend, tokens):
    backend.queue(CHATGPT_URL, status=401, text="expired")
    backend.queue(TOKEN_URL, status=400, text="invalid_grant")

    with pytest.raises(RefreshFailedError) as exc_info:
        await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert exc_info.value.status == 400
    assert len(backend.calls(CHATGPT_URL)) == 1


@pytest.mark.asyncio
async def test_non_auth_failure_is_not_retried(backend, tokens):
    backend.queue(CHATGPT_URL, status=500, text="boom")

    with pytest.raises(BackendError):
        await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert len(backend.requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("prompt", ["", "   ", "\n\t"])
async def test_empty_prompt_makes_no_request(backend, tokens, prompt):
    with pytest.raises(EmptyPromptError):
        await make_client(backend).complete(SessionCredential(tokens), prompt)
    assert backend.requests == []


@pytest.mark.asyncio
async def test_prompt_is_trimmed(backend):
    backend.queue(OPENAI_URL, json_body=reply("ok"))

    text = await make_client(backend).complete_text(ApiKeyCredential("sk"), "  question \n")

    assert text == "ok"
    (request,) = backend.requests
    body = json.loads(request.content)
    assert body["input"][0]["content"][0]["text"] == "question"


@pytest.mark.asyncio
async def test_failure_after_refresh_carries_new_tokens(backend, tokens):
    backend.queue(CHATGPT_URL, status=401, text="expired")
    backend.queue(TOKEN_URL, json_body={
        "id_token": tokens.id_token,
        "access_token": "access-new",
        "refresh_token": "refresh-rotated",
    })
    backend.queue(CHATGPT_URL, status=500, text="boom")

    with pytest.raises(BackendError) as exc_info:
        await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert exc_info.value.status == 500
    assert exc_info.value.tokens == TokenBundle(
        id_token=tokens.id_token, access_token="access-new", refresh_token="refresh-rotated"
    )


@pytest.mark.asyncio
async def test_rejected_after_refresh_carries_new_tokens(backend, tokens):
    backend.queue(CHATGPT_URL, status=401, text="expired")
    backend.queue(TOKEN_URL, json_body={"id_token": tokens.id_token, "access_token": "access-new"})
    backend.queue(CHATGPT_URL, status=401, text="still expired")

    with pytest.raises(RefreshRejectedError) as exc_info:
        await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert exc_info.value.tokens.access_token == "access-new"


@pytest.mark.asyncio
async def test_failure_without_refresh_carries_no_tokens(backend, tokens):
    backend.queue(CHATGPT_URL, status=500, text="boom")

    with pytest.raises(BackendError) as exc_info:
        await make_client(backend).complete(SessionCredential(tokens), "hi")

    assert exc_info.value.tokens is None
