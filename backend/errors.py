"""Service-level error taxonomy.

Every error the services raise derives from :class:`AppError`.  Each class
knows the HTTP status it maps to and how to render itself as the JSON error
envelope ``{"message": ..., ...}``; the API layer only has to look these up.
"""

from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base class for errors that are safe to report to the caller."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message}


class ValidationError(AppError):
    """Missing or malformed caller input."""

    status_code = 400


class Conflict(AppError):
    """A unique resource (e.g. a registered email) already exists."""

    status_code = 409


class Unauthenticated(AppError):
    """No credentials, or credentials that do not match an identity."""

    status_code = 401


class InvalidToken(Unauthenticated):
    """A session token failed signature, format or expiry checks."""


class ConfigurationError(AppError):
    """A required integration has not been configured."""

    status_code = 500


class UpstreamError(AppError):
    """A call to an external HTTP service failed.

    Attributes:
        url: The URL that was attempted.
        upstream_status: HTTP status from the upstream, ``None`` when no
            response was received (network error, timeout).
        code: Name of the failure class, e.g. ``ReadTimeout``.
    """

    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        url: str,
        upstream_status: Optional[int] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.upstream_status = upstream_status
        self.code = code

    def to_payload(self) -> dict[str, Any]:
        return {
            "message": "Upstream API failed",
            "upstream": self.url,
            "error": self.message,
            "code": self.code,
            "upstreamStatus": self.upstream_status,
        }


class PaymentError(UpstreamError):
    """The payment processor could not create a checkout session.

    Details stay in the server log; the caller only gets a generic message.
    """

    status_code = 500

    def to_payload(self) -> dict[str, Any]:
        return {"message": "Payment session creation failed"}
