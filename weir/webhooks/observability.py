"""Structured logging of webhook delivery outcomes.

Every delivery ends in exactly one event: normalised, ignored, or rejected.
Messages use a ``[event_type] key=value`` layout suitable for log
aggregators. Ignored deliveries log at INFO.
"""

from __future__ import annotations

import enum
import typing as typ

from weir.logging import (
    format_log_message,
    get_logger,
    log_exception,
    log_info,
    log_warning,
)

from .errors import AuthenticationFailedError, MalformedPayloadError, PayloadReadError

if typ.TYPE_CHECKING:
    from weir.logging import _SupportsLog

    from .models import WebhookInfo

logger = get_logger(__name__)


class WebhookLogEventType(enum.StrEnum):
    """Structured log event types for webhook deliveries."""

    DELIVERY_NORMALISED = "webhook.delivery.normalised"
    DELIVERY_IGNORED = "webhook.delivery.ignored"
    DELIVERY_REJECTED = "webhook.delivery.rejected"


class ErrorCategory(enum.StrEnum):
    """Why a delivery was rejected."""

    AUTHENTICATION = "authentication"
    TRANSPORT = "transport"
    MALFORMED_PAYLOAD = "malformed_payload"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (AuthenticationFailedError, ErrorCategory.AUTHENTICATION),
    (PayloadReadError, ErrorCategory.TRANSPORT),
    (MalformedPayloadError, ErrorCategory.MALFORMED_PAYLOAD),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Return the rejection category for ``exc``."""
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category
    return ErrorCategory.UNKNOWN


class WebhookEventLogger:
    """Emit one structured log line per webhook delivery.

    Parameters
    ----------
    sink_logger
        Logger receiving the records; defaults to this module's
        femtologging logger.

    """

    def __init__(self, sink_logger: _SupportsLog | None = None) -> None:
        """Initialise with an optional logger override."""
        self._logger = sink_logger if sink_logger is not None else logger

    def log_delivery_normalised(self, provider: str, info: WebhookInfo) -> None:
        """Log a delivery that produced a canonical event."""
        log_info(
            self._logger,
            "[%s] provider=%s event=%s repository=%s branch=%s pull_request_id=%d",
            WebhookLogEventType.DELIVERY_NORMALISED,
            provider,
            info.event,
            info.target_repository_details.full_name,
            info.target_branch,
            info.pull_request_id,
        )

    def log_delivery_ignored(self, provider: str, event_key: str | None) -> None:
        """Log a delivery whose event kind is not handled."""
        log_info(
            self._logger,
            "[%s] provider=%s event_key=%s",
            WebhookLogEventType.DELIVERY_IGNORED,
            provider,
            event_key,
        )

    def log_delivery_rejected(
        self,
        provider: str,
        event_key: str | None,
        error: BaseException,
    ) -> None:
        """Log a rejected delivery with its error category.

        Client-side problems log at WARNING; anything uncategorised logs at
        ERROR with the traceback attached.
        """
        category = categorize_error(error)
        template = (
            "[%s] provider=%s event_key=%s error_type=%s error_category=%s "
            "error_message=%s"
        )
        args = (
            WebhookLogEventType.DELIVERY_REJECTED,
            provider,
            event_key,
            type(error).__name__,
            category,
            str(error),
        )
        if category is ErrorCategory.UNKNOWN:
            log_exception(self._logger, format_log_message(template, *args), error)
        else:
            log_warning(self._logger, template, *args)
