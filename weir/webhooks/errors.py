"""Errors raised while authenticating and normalising webhook deliveries.

Each error rejects a single delivery. None of them is retried here: retry
policy belongs to whoever sent the request.
"""

from __future__ import annotations


class AuthenticationFailedError(RuntimeError):
    """Raised when the delivery's shared secret does not match."""

    @classmethod
    def token_mismatch(cls) -> AuthenticationFailedError:
        """Return an error for a token that differs from the expected one."""
        return cls("Webhook token mismatch")

    @classmethod
    def missing_token(cls) -> AuthenticationFailedError:
        """Return an error for a delivery that carries no token at all."""
        return cls("Webhook token required but not supplied")


class PayloadReadError(OSError):
    """Raised when the request body cannot be read."""

    @classmethod
    def no_request(cls) -> PayloadReadError:
        """Return an error for a parser invoked without a request."""
        return cls("Webhook request is missing")

    @classmethod
    def unreadable(cls, exc: BaseException) -> PayloadReadError:
        """Return an error wrapping the failure raised by the body stream."""
        return cls(f"Failed to read webhook body: {exc}")


class MalformedPayloadError(ValueError):
    """Raised when a payload cannot be mapped onto the provider schema.

    Attributes
    ----------
    reason
        Human-readable description of the violation.
    field
        Dotted path of the offending payload field, when known.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialise with a reason and an optional payload field path."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)

    @classmethod
    def invalid_json(cls, detail: str) -> MalformedPayloadError:
        """Return an error for bodies msgspec refuses to decode."""
        return cls(f"Payload does not match the Bitbucket Cloud schema: {detail}")

    @classmethod
    def empty_changes(cls) -> MalformedPayloadError:
        """Return an error for a push delivery without any change entries."""
        return cls("Push payload contains no changes", field="push.changes")

    @classmethod
    def invalid_full_name(
        cls, full_name: str, *, field: str | None = None
    ) -> MalformedPayloadError:
        """Return an error for a repository name not in ``owner/name`` form."""
        return cls(
            f"Invalid repository full name: expected 'owner/name', got {full_name!r}",
            field=field,
        )


__all__ = [
    "AuthenticationFailedError",
    "MalformedPayloadError",
    "PayloadReadError",
]
