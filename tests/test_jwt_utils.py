"""Tests for identity token decoding."""

import pytest

from codex_auth import (
    MalformedTokenError,
    MissingAccountClaimError,
    TokenDecodeError,
    decode_jwt_payload,
    extract_chatgpt_account_id,
)
from helpers import b64url, make_id_token, make_jwt


def test_extracts_account_id_from_claim():
    assert extract_chatgpt_account_id(make_id_token("acct-42")) == "acct-42"


def test_payload_without_padding_decodes():
    # 1-, 2- and 3-character tails after removing "=" padding
    for name in ("a", "ab", "abc"):
        token = make_jwt({"sub": name})
        assert decode_jwt_payload(token) == {"sub": name}


def test_signature_is_not_verified():
    token = make_id_token("acct-1")
    header, payload, _ = token.split(".")
    assert extract_chatgpt_account_id(f"{header}.{payload}.garbage") == "acct-1"


@pytest.mark.parametrize("token", ["", "onlyone", "a.b", "a.b.c.d", "a..c", ".b.c"])
def test_wrong_segment_count_is_malformed(token):
    with pytest.raises(MalformedTokenError):
        decode_jwt_payload(token)


def test_non_base64_payload_is_decode_error():
    with pytest.raises(TokenDecodeError):
        decode_jwt_payload("aGVhZGVy.!!!not-base64!!!.c2ln")


def test_non_json_payload_is_decode_error():
    token = f"aGVhZGVy.{b64url(b'not json at all')}.c2ln"
    with pytest.raises(TokenDecodeError):
        decode_jwt_payload(token)


def test_json_array_payload_is_decode_error():
    with pytest.raises(TokenDecodeError):
        decode_jwt_payload(make_jwt(["not", "an", "object"]))


def test_missing_claim_container():
    with pytest.raises(MissingAccountClaimError) as exc_info:
        extract_chatgpt_account_id(make_jwt({"sub": "user"}))
    assert exc_info.value.claim == "https://api.openai.com/auth.chatgpt_account_id"


@pytest.mark.parametrize(
    "claims",
    [
        {},
        {"chatgpt_account_id": ""},
        {"chatgpt_account_id": 123},
        {"other": "value"},
    ],
)
def test_missing_or_unusable_account_claim(claims):
    token = make_jwt({"https://api.openai.com/auth": claims})
    with pytest.raises(MissingAccountClaimError):
        extract_chatgpt_account_id(token)


def test_claim_container_must_be_object():
    token = make_jwt({"https://api.openai.com/auth": "acct-1"})
    with pytest.raises(MissingAccountClaimError):
        extract_chatgpt_account_id(token)


@pytest.mark.parametrize(
    "payload_segment",
    [
        b64url(b'{"sub": "x"}') + "=",
        b64url(b'{"a": "??>"}').replace("_", "/").replace("-", "+"),
        "eyJzdWIiOiJ4In0=",
    ],
)
def test_padded_or_standard_alphabet_payload_is_rejected(payload_segment):
    with pytest.raises(TokenDecodeError):
        decode_jwt_payload(f"aGVhZGVy.{payload_segment}.c2ln")
