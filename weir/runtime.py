"""Weir runtime entrypoint.

Keeps ``weir.runtime:create_app`` stable as the Granian factory target and
delegates construction to :func:`weir.api.app.create_app`.

Configuration is driven by environment variables:

- ``WEIR_HOST``: Bind address (default ``0.0.0.0``)
- ``WEIR_PORT``: Listen port (default ``8080``)
- ``WEIR_LOG_LEVEL``: Log level (default ``INFO``)
- ``WEIR_BITBUCKET_WEBHOOK_TOKEN``: Expected Bitbucket Cloud ``token``
  query parameter (default empty, meaning unauthenticated)

Run the service directly with ``python -m weir.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from weir.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from weir.webhooks.config import WebhookConfig

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid WEIR_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from environment configuration."""
    from weir.api.app import create_app as _create_api_app

    return _create_api_app()


def main() -> None:
    """Start the Weir webhook receiver using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("WEIR_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("WEIR_PORT", "8080"))
    log_level_str = os.environ.get("WEIR_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid WEIR_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    if not WebhookConfig.from_env().bitbucket_token:
        log_warning(
            logger,
            "WEIR_BITBUCKET_WEBHOOK_TOKEN is unset; deliveries without a token "
            "will be accepted",
        )

    log_info(
        logger,
        "Starting Weir runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "weir.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
