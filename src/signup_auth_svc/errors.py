from dataclasses import dataclass
from enum import Enum

from fastapi import status


class FailureKind(str, Enum):
    """
    Named failure kinds returned by the authentication core.
    """
    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAUTHENTICATED = "unauthenticated"
    RATE_LIMITED = "rate_limited"


STATUS_BY_KIND = {
    FailureKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    FailureKind.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    FailureKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    FailureKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    FailureKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
}


@dataclass(frozen=True)
class AuthFailure:
    """
    A handled, non-fatal failure. Returned instead of raised so callers must branch on it.
    """
    kind: FailureKind
    message: str

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class AuthHTTPException(Exception):
    """
    Raised at the HTTP boundary to turn an AuthFailure into an error envelope.
    """

    def __init__(self, failure: AuthFailure, headers=None):
        super().__init__(failure.message)
        self.failure = failure
        self.headers = headers


class InternalServerError(Exception):
    """
    Wraps an unexpected failure; rendered as a 500 whose detail is shown only in development.
    """

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
