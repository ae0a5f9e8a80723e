"""Webhook receiver resources.

Usage
-----
Register the Bitbucket Cloud receiver on the Falcon app::

    from weir.api.webhooks.resources import BitbucketCloudWebhookResource

    app.add_route(
        "/webhooks/bitbucket-cloud",
        BitbucketCloudWebhookResource(config=WebhookConfig.from_env()),
    )

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon
import msgspec

from weir.webhooks.bitbucket_cloud import BitbucketCloudWebhook
from weir.webhooks.observability import WebhookEventLogger

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from weir.webhooks.config import WebhookConfig
    from weir.webhooks.models import WebhookInfo

__all__ = [
    "PROVIDER_CONTEXT_KEY",
    "BitbucketCloudWebhookResource",
    "WebhookEventSink",
]

PROVIDER_CONTEXT_KEY = "webhook_provider"
BITBUCKET_CLOUD_PROVIDER = "bitbucket_cloud"


@typ.runtime_checkable
class WebhookEventSink(typ.Protocol):
    """Downstream consumer of canonical events, such as a CI trigger."""

    async def publish(self, info: WebhookInfo) -> None:
        """Hand ``info`` to the consumer."""
        ...


class BitbucketCloudWebhookResource:
    """Receive Bitbucket Cloud deliveries and answer with canonical events.

    Responds 200 with the JSON-encoded ``WebhookInfo`` once the optional
    sink has accepted it, or 202 when the event kind is not handled.
    Authentication and payload errors propagate to the handlers in
    :mod:`weir.api.errors`.

    Parameters
    ----------
    config
        Expected shared secrets.
    event_sink
        Optional consumer that receives each canonical event.
    event_logger
        Delivery outcome logger.

    """

    def __init__(
        self,
        *,
        config: WebhookConfig,
        event_sink: WebhookEventSink | None = None,
        event_logger: WebhookEventLogger | None = None,
    ) -> None:
        """Initialise the resource with its configuration and collaborators."""
        self._config = config
        self._event_sink = event_sink
        self._event_logger = event_logger or WebhookEventLogger()

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /webhooks/bitbucket-cloud requests."""
        setattr(req.context, PROVIDER_CONTEXT_KEY, BITBUCKET_CLOUD_PROVIDER)
        webhook = BitbucketCloudWebhook(req)
        info = await webhook.parse(self._config.bitbucket_token)

        if info is None:
            self._event_logger.log_delivery_ignored(
                BITBUCKET_CLOUD_PROVIDER, webhook.event_key
            )
            resp.status = HTTPStatus.ACCEPTED
            resp.media = {"status": "ignored", "event_key": webhook.event_key}
            return

        if self._event_sink is not None:
            await self._event_sink.publish(info)

        self._event_logger.log_delivery_normalised(BITBUCKET_CLOUD_PROVIDER, info)
        resp.status = HTTPStatus.OK
        resp.content_type = falcon.MEDIA_JSON
        resp.data = msgspec.json.encode(info)
