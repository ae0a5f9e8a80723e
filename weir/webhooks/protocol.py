"""Protocols shared by webhook parsers and the requests they read."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from weir.webhooks.models import WebhookInfo


class SupportsAsyncRead(typ.Protocol):
    """Body stream that can be drained asynchronously."""

    async def read(self, size: int | None = None) -> bytes:
        """Read up to ``size`` bytes, or everything when ``size`` is None."""
        ...


class WebhookRequest(typ.Protocol):
    """The parts of an inbound HTTP request a webhook parser needs.

    ``falcon.asgi.Request`` satisfies this protocol, which keeps parsers
    testable with lightweight fakes.
    """

    @property
    def params(self) -> cabc.Mapping[str, str | list[str]]:
        """Query parameters; repeated keys map to a list of values."""
        ...

    @property
    def stream(self) -> SupportsAsyncRead:
        """Request body stream."""
        ...

    def get_header(self, name: str) -> str | None:
        """Return the header value, or None when absent."""
        ...


@typ.runtime_checkable
class WebhookParser(typ.Protocol):
    """Provider-specific authentication and normalisation of deliveries.

    A parser is bound to one request at construction time; both methods
    operate on that request. The protocol is runtime_checkable so the HTTP
    layer can accept any parser factory in tests.
    """

    async def validate_payload(self, token: bytes) -> bytes:
        """Check ``token`` against the delivery and return the raw body.

        Raises
        ------
        AuthenticationFailedError
            If the delivery's shared secret does not match ``token``.
        PayloadReadError
            If the body cannot be read.

        """
        ...

    def parse_incoming_webhook(self, payload: bytes) -> WebhookInfo | None:
        """Normalise ``payload``, returning None for unhandled event kinds.

        Raises
        ------
        MalformedPayloadError
            If ``payload`` does not fit the provider schema.

        """
        ...
