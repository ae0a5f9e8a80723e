"""Bitbucket Cloud webhook parser.

``BitbucketCloudWebhook`` wraps one inbound request. ``parse`` checks the
shared ``token`` query parameter, decodes the body, and maps the
``X-Event-Key`` header onto a push or pull request normaliser.

Usage
-----
Parse a delivery inside a Falcon ASGI resource::

    webhook = BitbucketCloudWebhook(req)
    info = await webhook.parse(b"s3cret")
    if info is None:
        ...  # event kind not handled; not an error

"""

from __future__ import annotations

import enum
import hmac
import typing as typ

from weir.common.time import unix_seconds
from weir.webhooks.bitbucket_cloud.fields import (
    branch_name,
    change_branch_status,
    compare_url,
    extract_email,
    parent_hash,
    repository_details,
    resolve_login,
)
from weir.webhooks.bitbucket_cloud.payload import decode_payload
from weir.webhooks.errors import (
    AuthenticationFailedError,
    MalformedPayloadError,
    PayloadReadError,
)
from weir.webhooks.models import (
    CommitInfo,
    RepositoryDetails,
    UserInfo,
    WebhookEvent,
    WebhookInfo,
)
from weir.webhooks.validation import validate_and_parse_http_request

if typ.TYPE_CHECKING:
    from weir.webhooks.bitbucket_cloud.payload import (
        BitbucketCloudPayload,
        BitbucketPullRequest,
    )
    from weir.webhooks.protocol import WebhookRequest

__all__ = [
    "EVENT_HEADER_KEY",
    "TOKEN_PARAM",
    "BitbucketCloudWebhook",
    "BitbucketEventKey",
]

EVENT_HEADER_KEY = "X-Event-Key"
TOKEN_PARAM = "token"


class BitbucketEventKey(enum.StrEnum):
    """``X-Event-Key`` values the parser normalises."""

    REPO_PUSH = "repo:push"
    PR_CREATED = "pullrequest:created"
    PR_UPDATED = "pullrequest:updated"
    PR_FULFILLED = "pullrequest:fulfilled"
    PR_REJECTED = "pullrequest:rejected"

    @classmethod
    def from_header(cls, value: str | None) -> BitbucketEventKey | None:
        """Return the matching key, or None for anything unhandled."""
        try:
            return cls(value)
        except ValueError:
            return None


_PULL_REQUEST_EVENTS: dict[BitbucketEventKey, WebhookEvent] = {
    BitbucketEventKey.PR_CREATED: WebhookEvent.PR_OPENED,
    BitbucketEventKey.PR_UPDATED: WebhookEvent.PR_EDITED,
    BitbucketEventKey.PR_FULFILLED: WebhookEvent.PR_MERGED,
    BitbucketEventKey.PR_REJECTED: WebhookEvent.PR_REJECTED,
}


def _first_param(value: str | list[str]) -> str:
    if isinstance(value, list):
        return value[0] if value else ""
    return value


class BitbucketCloudWebhook:
    """Authenticate and normalise a Bitbucket Cloud webhook delivery.

    Parameters
    ----------
    request
        Inbound request carrying the ``X-Event-Key`` header, the optional
        ``token`` query parameter, and the JSON body.

    """

    def __init__(self, request: WebhookRequest) -> None:
        """Bind the parser to ``request``."""
        self._request = request

    @property
    def event_key(self) -> str | None:
        """Return the raw ``X-Event-Key`` header value."""
        return self._request.get_header(EVENT_HEADER_KEY)

    async def parse(self, token: bytes) -> WebhookInfo | None:
        """Authenticate, decode, and normalise the bound request.

        Parameters
        ----------
        token
            Expected shared secret. Empty disables the check unless the
            request itself carries a ``token`` parameter.

        Returns
        -------
        WebhookInfo | None
            The canonical event, or ``None`` for unhandled event kinds.

        """
        return await validate_and_parse_http_request(self, token, self._request)

    async def validate_payload(self, token: bytes) -> bytes:
        """Check the ``token`` query parameter and read the request body.

        Raises
        ------
        AuthenticationFailedError
            If a token is expected or supplied and the two differ.
        PayloadReadError
            If the body stream fails.

        """
        params = self._request.params
        if token or TOKEN_PARAM in params:
            if TOKEN_PARAM not in params:
                raise AuthenticationFailedError.missing_token()
            supplied = _first_param(params[TOKEN_PARAM]).encode()
            if not hmac.compare_digest(supplied, token):
                raise AuthenticationFailedError.token_mismatch()

        try:
            return await self._request.stream.read()
        except OSError as exc:
            raise PayloadReadError.unreadable(exc) from exc

    def parse_incoming_webhook(self, payload: bytes) -> WebhookInfo | None:
        """Decode ``payload`` and dispatch on the ``X-Event-Key`` header."""
        hook = decode_payload(payload)

        match BitbucketEventKey.from_header(self.event_key):
            case None:
                return None
            case BitbucketEventKey.REPO_PUSH:
                return self._parse_push_event(hook)
            case key:
                event = _PULL_REQUEST_EVENTS[key]
                return self._parse_pr_event(hook.pull_request, event)

    def _parse_push_event(self, hook: BitbucketCloudPayload) -> WebhookInfo:
        # Multi-branch pushes are reported by their first change only.
        if not hook.changes:
            raise MalformedPayloadError.empty_changes()
        first_change = hook.changes[0]
        last_commit = first_change.head_commit
        before_hash = parent_hash(last_commit)
        full_name = hook.repository_full_name
        login = resolve_login(last_commit, hook.actor_nickname)

        return WebhookInfo(
            event=WebhookEvent.PUSH,
            target_repository_details=repository_details(
                full_name, field="repository.full_name"
            ),
            target_branch=branch_name(first_change),
            source_repository_details=RepositoryDetails(),
            source_branch="",
            pull_request_id=0,
            timestamp=unix_seconds(last_commit.date),
            commit=CommitInfo(
                hash=last_commit.hash,
                message=last_commit.message,
                url=last_commit.html_url,
            ),
            before_commit=CommitInfo(hash=before_hash),
            branch_status=change_branch_status(first_change),
            triggered_by=UserInfo(login=hook.actor_nickname),
            committer=UserInfo(login=login),
            author=UserInfo(login=login, email=extract_email(last_commit.author_raw)),
            compare_url=compare_url(full_name, last_commit.hash, before_hash),
        )

    def _parse_pr_event(
        self, pull_request: BitbucketPullRequest, event: WebhookEvent
    ) -> WebhookInfo:
        return WebhookInfo(
            event=event,
            pull_request_id=pull_request.id,
            target_repository_details=repository_details(
                pull_request.destination_endpoint.full_name,
                field="pullrequest.destination.repository.full_name",
            ),
            target_branch=pull_request.destination_endpoint.branch_name,
            source_repository_details=repository_details(
                pull_request.source_endpoint.full_name,
                field="pullrequest.source.repository.full_name",
            ),
            source_branch=pull_request.source_endpoint.branch_name,
            timestamp=unix_seconds(pull_request.updated_on),
        )
