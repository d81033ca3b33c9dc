"""Exception types raised by the OAuth flow."""

from __future__ import annotations

from typing import Any


class OAuthError(Exception):
    """Base exception for OAuth related errors."""


class ProviderError(OAuthError):
    """
    The identity provider answered with a non-2xx status, or could not be reached.

    `status` is None for transport failures (timeouts, refused connections).
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        details: Any = None,
        code: str = "http_error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details
        self.code = code


class InvalidTokenBundle(OAuthError):
    """A token bundle is missing required fields or is malformed."""
