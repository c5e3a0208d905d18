"""
Error taxonomy for the upload gateway.

Every failure the HTTP surface can report maps to one of these classes.
Exception handlers in main.py render them as {"error": ..., "details": ...}
with the class's status code.
"""
from typing import Optional


class GatewayError(Exception):
    """Base class for gateway errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(GatewayError):
    """Malformed or missing request fields."""

    status_code = 400


class AuthorizationError(GatewayError):
    """Request origin is not in the allow-list."""

    status_code = 403


class NotFoundError(GatewayError):
    """Unknown endpoint."""

    status_code = 404


class UpstreamError(GatewayError):
    """Storage backend call failed or returned an unexpected shape."""

    status_code = 502


class SourceDeleteError(UpstreamError):
    """
    The copy reached the target folder but the original could not be removed.

    The object now exists in both folders and needs manual reconciliation.
    """
