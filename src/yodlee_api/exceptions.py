"""Exception hierarchy for the Yodlee client.

Every failure surfaces to the immediate caller as one of these; nothing is
retried or swallowed.
"""

from __future__ import annotations

from typing import Any


class YodleeError(Exception):
    """Base exception for all Yodlee client errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidCredentialsError(YodleeError):
    """Cobrand or user username/password is missing."""


class PartialTokenError(YodleeError):
    """Only some of the pre-seeded tokens and expirations were supplied."""


class InvalidArgumentError(YodleeError):
    """A required per-call field is missing."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class AuthenticationError(YodleeError):
    """A cobrand or user login request failed."""


class ApiError(YodleeError):
    """An endpoint reported an error, or the transport failed.

    ``detail`` holds whichever error shape the service used: the first
    ``Error[].errorDetail`` entry or the top-level ``message`` field.
    """

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        status_code: int | None = None,
        body: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.detail = detail if detail is not None else message
        self.status_code = status_code
        self.body = body


class SessionExpiredError(YodleeError):
    """The user session expired and no credentials were given to renew it."""


class ProtocolError(YodleeError):
    """The response body was not the JSON object the service promises."""

    def __init__(self, message: str, status_code: int | None = None, text: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.text = text
