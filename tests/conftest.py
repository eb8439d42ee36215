"""Shared fixtures: fake backends, token bundles and isolated settings."""
from __future__ import annotations

import pytest

import settings
from codex_auth import TokenBundle
from helpers import FakeBackend, make_id_token


@pytest.fixture(autouse=True)
def no_stream_trace(monkeypatch, tmp_path):
    """Keep tracing off and any trace output inside tmp_path."""
    monkeypatch.setattr(settings, "STREAM_TRACE_ENABLED", False)
    monkeypatch.setattr(settings, "STREAM_TRACE_DIR", str(tmp_path / "traces"))


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def id_token() -> str:
    return make_id_token("acct-123")


@pytest.fixture()
def tokens(id_token) -> TokenBundle:
    return TokenBundle(id_token=id_token, access_token="access-old", refresh_token="refresh-old")
