"""Health probe resources for container liveness and readiness checks.

Neither probe touches the webhook pipeline, so both respond even when no
webhook secret is configured.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe returning ``{"status": "ready"}``.

    The receiver is stateless, so it is ready as soon as it is alive.
    """

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        resp.media = {"status": "ready"}
        resp.status = HTTPStatus.OK
