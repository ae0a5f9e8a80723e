"""Configuration for webhook authentication.

Usage
-----
Create a configuration that accepts unauthenticated deliveries:

>>> WebhookConfig().bitbucket_token
b''

Or one that expects a shared secret:

>>> WebhookConfig(bitbucket_token=b"s3cret").bitbucket_token
b's3cret'

At runtime, ``WebhookConfig.from_env()`` reads the secret from
``WEIR_BITBUCKET_WEBHOOK_TOKEN``.

"""

from __future__ import annotations

import dataclasses as dc
import os

BITBUCKET_TOKEN_ENV = "WEIR_BITBUCKET_WEBHOOK_TOKEN"


@dc.dataclass(frozen=True, slots=True)
class WebhookConfig:
    """Shared secrets expected on inbound deliveries.

    Attributes
    ----------
    bitbucket_token
        Value Bitbucket Cloud must send in the ``token`` query parameter.
        Empty means deliveries are accepted without a token, although a
        token that is supplied must still match.

    """

    bitbucket_token: bytes = b""

    @classmethod
    def from_env(cls) -> WebhookConfig:
        """Create configuration from ``WEIR_BITBUCKET_WEBHOOK_TOKEN``.

        Surrounding whitespace is stripped so secrets mounted from files
        with a trailing newline still match.
        """
        raw = os.environ.get(BITBUCKET_TOKEN_ENV, "")
        return cls(bitbucket_token=raw.strip().encode())
