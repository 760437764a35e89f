from __future__ import annotations

import copy
from enum import Enum


class ErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    SAFETY_BLOCKED = "safety_blocked"
    EMPTY_RESPONSE = "empty_response"
    MISSING_IMAGE = "missing_image"
    UNEXPECTED_FINISH = "unexpected_finish"
    UNKNOWN = "unknown"
    TIMED_OUT = "timed_out"
    CONFIGURATION = "configuration"
    INVALID_REQUEST = "invalid_request"


class StudioError(Exception):
    """
    Base for every failure surfaced to callers.

    The message is always human-readable; `kind` is the only structured
    classification that survives past the retry layer.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def with_context(self, prefix: str) -> StudioError:
        """Same error class and attributes, message prefixed for the caller."""
        clone = copy.copy(self)
        clone.message = f"{prefix} Details: {self.message}"
        clone.args = (clone.message,)
        return clone


class RateLimitedError(StudioError):
    kind = ErrorKind.RATE_LIMITED


class SafetyBlockedError(StudioError):
    kind = ErrorKind.SAFETY_BLOCKED

    def __init__(self, message: str, categories: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.categories = categories


class EmptyResponseError(StudioError):
    kind = ErrorKind.EMPTY_RESPONSE


class MissingImageError(StudioError):
    kind = ErrorKind.MISSING_IMAGE


class UnexpectedFinishError(StudioError):
    kind = ErrorKind.UNEXPECTED_FINISH

    def __init__(self, message: str, reason: str = "") -> None:
        super().__init__(message)
        self.reason = reason


class UnknownServiceError(StudioError):
    kind = ErrorKind.UNKNOWN


class JobTimeoutError(StudioError):
    kind = ErrorKind.TIMED_OUT


class MissingCredentialError(StudioError):
    kind = ErrorKind.CONFIGURATION


class InvalidRequestError(StudioError, ValueError):
    kind = ErrorKind.INVALID_REQUEST


class TransportError(Exception):
    """Structured failure raised by the provider layer for a single service call."""

    def __init__(self, message: str, status_code: int | None = None, status: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status = status
