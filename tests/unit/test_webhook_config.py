"""Unit tests for webhook configuration."""

from __future__ import annotations

import doctest
import os
import typing as typ

import weir.webhooks.config
from weir.webhooks.config import BITBUCKET_TOKEN_ENV, WebhookConfig

if typ.TYPE_CHECKING:
    import pytest


def test_default_accepts_unauthenticated_deliveries() -> None:
    """The default configuration expects no token."""
    assert WebhookConfig().bitbucket_token == b""


def test_from_env_reads_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """The expected token comes from the environment as bytes."""
    monkeypatch.setenv(BITBUCKET_TOKEN_ENV, "s3cret")
    assert WebhookConfig.from_env().bitbucket_token == b"s3cret"


def test_from_env_strips_whitespace(monkeypatch: pytest.MonkeyPatch) -> None:
    """Trailing newlines from mounted secrets are removed."""
    monkeypatch.setenv(BITBUCKET_TOKEN_ENV, "  s3cret\n")
    assert WebhookConfig.from_env().bitbucket_token == b"s3cret"


def test_from_env_without_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unset variable yields an empty token."""
    monkeypatch.delenv(BITBUCKET_TOKEN_ENV, raising=False)
    assert WebhookConfig.from_env().bitbucket_token == b""


def test_module_examples_leave_environment_untouched(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The usage examples pass without setting the token variable."""
    monkeypatch.delenv(BITBUCKET_TOKEN_ENV, raising=False)
    results = doctest.testmod(weir.webhooks.config)
    assert results.failed == 0
    assert results.attempted > 0
    assert BITBUCKET_TOKEN_ENV not in os.environ
