"""Webhook authentication and normalisation into canonical events."""

from __future__ import annotations

from .bitbucket_cloud import BitbucketCloudWebhook, BitbucketEventKey
from .config import WebhookConfig
from .errors import AuthenticationFailedError, MalformedPayloadError, PayloadReadError
from .models import (
    BranchStatus,
    CommitInfo,
    RepositoryDetails,
    UserInfo,
    WebhookEvent,
    WebhookInfo,
)
from .observability import (
    ErrorCategory,
    WebhookEventLogger,
    WebhookLogEventType,
    categorize_error,
)
from .protocol import WebhookParser, WebhookRequest
from .validation import branch_status, validate_and_parse_http_request

__all__ = [
    "AuthenticationFailedError",
    "BitbucketCloudWebhook",
    "BitbucketEventKey",
    "BranchStatus",
    "CommitInfo",
    "ErrorCategory",
    "MalformedPayloadError",
    "PayloadReadError",
    "RepositoryDetails",
    "UserInfo",
    "WebhookConfig",
    "WebhookEvent",
    "WebhookEventLogger",
    "WebhookInfo",
    "WebhookLogEventType",
    "WebhookParser",
    "WebhookRequest",
    "branch_status",
    "categorize_error",
    "validate_and_parse_http_request",
]
