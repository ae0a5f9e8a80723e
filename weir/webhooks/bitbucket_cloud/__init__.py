"""Bitbucket Cloud webhook parsing."""

from __future__ import annotations

from .parser import (
    EVENT_HEADER_KEY,
    TOKEN_PARAM,
    BitbucketCloudWebhook,
    BitbucketEventKey,
)
from .payload import BitbucketCloudPayload, decode_payload

__all__ = [
    "EVENT_HEADER_KEY",
    "TOKEN_PARAM",
    "BitbucketCloudPayload",
    "BitbucketCloudWebhook",
    "BitbucketEventKey",
    "decode_payload",
]
