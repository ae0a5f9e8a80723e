"""Unit tests for weir.api.app application factory.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_app.py

"""

from __future__ import annotations

import falcon
import falcon.asgi
import falcon.testing
import pytest

from tests.helpers.bitbucket_payloads import encode, push_payload
from weir.api.app import BITBUCKET_CLOUD_ROUTE, AppDependencies, create_app
from weir.webhooks.config import BITBUCKET_TOKEN_ENV, WebhookConfig


class TestCreateApp:
    """Tests for create_app()."""

    def test_returns_falcon_app(self) -> None:
        """create_app() returns a Falcon ASGI App."""
        app = create_app(AppDependencies(webhook_config=WebhookConfig()))
        assert isinstance(app, falcon.asgi.App), "expected Falcon ASGI App"

    @pytest.mark.parametrize(
        ("path", "body"), [("/health", {"status": "ok"}), ("/ready", {"status": "ready"})]
    )
    def test_probe_routes(self, path: str, body: dict[str, str]) -> None:
        """Health probes are always registered."""
        client = falcon.testing.TestClient(create_app())
        result = client.simulate_get(path)
        assert result.status == falcon.HTTP_200, f"expected HTTP 200 from {path}"
        assert result.json == body, f"wrong {path} body"

    def test_webhook_route_registered(self) -> None:
        """The Bitbucket Cloud receiver is mounted."""
        client = falcon.testing.TestClient(create_app())
        result = client.simulate_get(BITBUCKET_CLOUD_ROUTE)
        assert result.status == falcon.HTTP_405, "route exists but only accepts POST"

    def test_explicit_config_wins_over_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A supplied WebhookConfig is used instead of the environment."""
        monkeypatch.setenv(BITBUCKET_TOKEN_ENV, "from-env")
        client = falcon.testing.TestClient(
            create_app(AppDependencies(webhook_config=WebhookConfig(b"explicit")))
        )

        result = client.simulate_post(
            BITBUCKET_CLOUD_ROUTE,
            body=encode(push_payload()),
            headers={"X-Event-Key": "repo:push"},
            params={"token": "explicit"},
        )

        assert result.status == falcon.HTTP_200, "explicit token should authenticate"

    def test_environment_config_by_default(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Without dependencies the secret is read from the environment."""
        monkeypatch.setenv(BITBUCKET_TOKEN_ENV, "from-env")
        client = falcon.testing.TestClient(create_app())

        result = client.simulate_post(
            BITBUCKET_CLOUD_ROUTE,
            body=encode(push_payload()),
            headers={"X-Event-Key": "repo:push"},
        )

        assert result.status == falcon.HTTP_401, "missing token must be rejected"
