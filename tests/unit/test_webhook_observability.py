"""Unit tests for webhook delivery observability."""

from __future__ import annotations

import pytest

from weir.webhooks.errors import (
    AuthenticationFailedError,
    MalformedPayloadError,
    PayloadReadError,
)
from weir.webhooks.models import RepositoryDetails, WebhookEvent, WebhookInfo
from weir.webhooks.observability import (
    ErrorCategory,
    WebhookEventLogger,
    WebhookLogEventType,
    categorize_error,
)


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        del stack_info
        self.calls.append((level, message, exc_info))
        return message


class TestCategorizeError:
    """Tests for error categorization."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (AuthenticationFailedError.token_mismatch(), ErrorCategory.AUTHENTICATION),
            (PayloadReadError.no_request(), ErrorCategory.TRANSPORT),
            (MalformedPayloadError.empty_changes(), ErrorCategory.MALFORMED_PAYLOAD),
            (RuntimeError("boom"), ErrorCategory.UNKNOWN),
        ],
    )
    def test_categories(self, exc: BaseException, expected: ErrorCategory) -> None:
        """Each webhook error maps to its category."""
        assert categorize_error(exc) == expected

    def test_plain_os_error_is_unknown(self) -> None:
        """Only PayloadReadError counts as a transport failure."""
        assert categorize_error(OSError("disk")) == ErrorCategory.UNKNOWN


class TestWebhookEventLogger:
    """Tests for WebhookEventLogger messages."""

    def test_normalised_delivery(self) -> None:
        """Normalised deliveries log at INFO with event details."""
        sink = _FakeLogger()
        info = WebhookInfo(
            event=WebhookEvent.PR_MERGED,
            target_repository_details=RepositoryDetails(owner="org", name="repo"),
            target_branch="main",
            pull_request_id=7,
        )

        WebhookEventLogger(sink).log_delivery_normalised("bitbucket_cloud", info)

        assert len(sink.calls) == 1
        level, message, _ = sink.calls[0]
        assert level == "INFO"
        assert message.startswith(f"[{WebhookLogEventType.DELIVERY_NORMALISED}]")
        assert "event=pr_merged" in message
        assert "repository=org/repo" in message
        assert "pull_request_id=7" in message

    def test_ignored_delivery_is_info(self) -> None:
        """Unhandled event kinds are not alarming."""
        sink = _FakeLogger()

        WebhookEventLogger(sink).log_delivery_ignored("bitbucket_cloud", "issue:created")

        assert sink.calls == [
            (
                "INFO",
                "[webhook.delivery.ignored] provider=bitbucket_cloud "
                "event_key=issue:created",
                None,
            )
        ]

    def test_known_rejection_is_warning(self) -> None:
        """Categorised rejections log at WARNING without a traceback."""
        sink = _FakeLogger()
        error = AuthenticationFailedError.token_mismatch()

        WebhookEventLogger(sink).log_delivery_rejected(
            "bitbucket_cloud", "repo:push", error
        )

        level, message, exc_info = sink.calls[0]
        assert level == "WARNING"
        assert "error_type=AuthenticationFailedError" in message
        assert "error_category=authentication" in message
        assert exc_info is None

    def test_unknown_rejection_is_error_with_traceback(self) -> None:
        """Uncategorised failures log at ERROR with exc_info."""
        sink = _FakeLogger()
        error = RuntimeError("boom")

        WebhookEventLogger(sink).log_delivery_rejected("bitbucket_cloud", None, error)

        level, message, exc_info = sink.calls[0]
        assert level == "ERROR"
        assert "error_category=unknown" in message
        assert exc_info is error
