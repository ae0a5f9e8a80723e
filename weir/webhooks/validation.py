"""Provider-neutral steps of the webhook pipeline."""

from __future__ import annotations

import typing as typ

from weir.webhooks.errors import PayloadReadError
from weir.webhooks.models import BranchStatus

if typ.TYPE_CHECKING:
    from weir.webhooks.models import WebhookInfo
    from weir.webhooks.protocol import WebhookParser, WebhookRequest


async def validate_and_parse_http_request(
    parser: WebhookParser,
    token: bytes,
    request: WebhookRequest | None,
) -> WebhookInfo | None:
    """Authenticate a delivery, then decode and normalise it.

    Parameters
    ----------
    parser
        Provider parser bound to ``request``.
    token
        Expected shared secret; empty means no authentication is required.
    request
        The inbound request the parser reads from.

    Returns
    -------
    WebhookInfo | None
        The canonical event, or ``None`` when the provider's event kind is
        not one the parser handles.

    Raises
    ------
    PayloadReadError
        If ``request`` is missing or its body cannot be read.
    AuthenticationFailedError
        If the delivery's token does not match ``token``.
    MalformedPayloadError
        If the body does not fit the provider schema.

    """
    if request is None:
        raise PayloadReadError.no_request()
    payload = await parser.validate_payload(token)
    return parser.parse_incoming_webhook(payload)


def branch_status(*, existed_before: bool, exists_after: bool) -> BranchStatus:
    """Classify a branch change from whether the ref existed on each side.

    >>> branch_status(existed_before=False, exists_after=True)
    <BranchStatus.CREATED: 'created'>
    """
    if existed_before and not exists_after:
        return BranchStatus.DELETED
    if exists_after and not existed_before:
        return BranchStatus.CREATED
    return BranchStatus.UPDATED
