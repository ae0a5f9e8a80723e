"""Application factory for the Weir Falcon ASGI application.

``create_app()`` registers the health probes and the Bitbucket Cloud
webhook receiver, and wires the webhook error handlers.

Usage
-----
Create an app that reads its secret from the environment::

    app = create_app()

Create an app with explicit configuration and a downstream sink::

    from weir.api.app import AppDependencies, create_app
    from weir.webhooks.config import WebhookConfig

    deps = AppDependencies(
        webhook_config=WebhookConfig(bitbucket_token=b"s3cret"),
        event_sink=ci_trigger,
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from weir.api.errors import register_error_handlers
from weir.api.health.resources import HealthResource, ReadyResource
from weir.api.webhooks.resources import BitbucketCloudWebhookResource
from weir.webhooks.config import WebhookConfig

if typ.TYPE_CHECKING:
    from weir.api.webhooks.resources import WebhookEventSink

__all__ = ["BITBUCKET_CLOUD_ROUTE", "AppDependencies", "create_app"]

BITBUCKET_CLOUD_ROUTE = "/webhooks/bitbucket-cloud"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    webhook_config
        Expected webhook secrets. When ``None`` the configuration is read
        from the environment at app creation.
    event_sink
        Optional consumer of canonical events.

    """

    webhook_config: WebhookConfig | None = None
    event_sink: WebhookEventSink | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies.

    Returns
    -------
    falcon.asgi.App
        App serving ``/health``, ``/ready`` and
        ``POST /webhooks/bitbucket-cloud``.

    """
    deps = dependencies or AppDependencies()
    config = deps.webhook_config or WebhookConfig.from_env()

    app = falcon.asgi.App()

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())
    app.add_route(
        BITBUCKET_CLOUD_ROUTE,
        BitbucketCloudWebhookResource(config=config, event_sink=deps.event_sink),
    )

    register_error_handlers(app)

    return app
