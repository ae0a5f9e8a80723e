"""Falcon error handlers for rejected webhook deliveries.

Each handler maps one error from :mod:`weir.webhooks.errors` onto an HTTP
response and records the rejection through ``WebhookEventLogger``.

Usage
-----
Register the handlers on the Falcon app::

    from weir.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from weir.api.webhooks.resources import PROVIDER_CONTEXT_KEY
from weir.webhooks.bitbucket_cloud import EVENT_HEADER_KEY
from weir.webhooks.errors import (
    AuthenticationFailedError,
    MalformedPayloadError,
    PayloadReadError,
)
from weir.webhooks.observability import WebhookEventLogger

if typ.TYPE_CHECKING:
    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "handle_authentication_failed",
    "handle_malformed_payload",
    "handle_payload_read_error",
    "register_error_handlers",
]

_event_logger = WebhookEventLogger()


def _log_rejection(req: Request, ex: BaseException) -> None:
    provider = getattr(req.context, PROVIDER_CONTEXT_KEY, "unknown")
    _event_logger.log_delivery_rejected(provider, req.get_header(EVENT_HEADER_KEY), ex)


async def handle_authentication_failed(
    req: Request,
    resp: Response,
    ex: AuthenticationFailedError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``AuthenticationFailedError`` to an HTTP 401 JSON response.

    The description does not say which part of the token check failed.
    """
    _log_rejection(req, ex)
    resp.status = falcon.HTTP_401
    resp.media = {
        "title": "Authentication failed",
        "description": "Webhook token rejected.",
    }


async def handle_payload_read_error(
    req: Request,
    resp: Response,
    ex: PayloadReadError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``PayloadReadError`` to an HTTP 400 JSON response."""
    _log_rejection(req, ex)
    resp.status = falcon.HTTP_400
    resp.media = {
        "title": "Unreadable payload",
        "description": str(ex),
    }


async def handle_malformed_payload(
    req: Request,
    resp: Response,
    ex: MalformedPayloadError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``MalformedPayloadError`` to an HTTP 400 JSON response.

    Parameters
    ----------
    req
        Falcon request, used for the event key in the rejection log.
    resp
        Falcon response whose status and media are set.
    ex
        The decoding or invariant failure, with optional field path.
    _params
        URI template parameters (unused).

    """
    _log_rejection(req, ex)
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Malformed payload",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Attach the webhook error handlers to ``app``."""
    app.add_error_handler(AuthenticationFailedError, handle_authentication_failed)
    app.add_error_handler(PayloadReadError, handle_payload_read_error)
    app.add_error_handler(MalformedPayloadError, handle_malformed_payload)
