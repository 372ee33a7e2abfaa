"""
Location: python/lnurl_pos/errors.py

Summary:
    Exception hierarchy for lnurl-pos. Every failure raised by the package
    is an LnurlPayError tagged with an ErrorKind, so callers can branch on
    the kind instead of matching message substrings.

Usage:
    Validation errors (InputValidationError subclasses) always reach the
    caller unwrapped. Service, timeout, transport and response-shape errors
    are given a short context prefix by the client identifying which step
    failed.

Example:
    from lnurl_pos import request_invoice
    from lnurl_pos.errors import AmountTooSmallError, ErrorKind

    try:
        await request_invoice("merchant@bringin.xyz", 10, pos_mode=True)
    except AmountTooSmallError as exc:
        print(f"Send at least {exc.minimum} sats")
    except LnurlPayError as exc:
        if exc.kind is ErrorKind.TIMEOUT:
            ...
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification of every error raised by the package."""

    MISSING_FIELD = "MissingField"
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_ADDRESS_FORMAT = "InvalidAddressFormat"
    INVALID_COMMENT = "InvalidComment"
    ONION_NOT_ALLOWED = "OnionNotAllowed"
    COMMENT_TOO_LONG = "CommentTooLong"
    AMOUNT_TOO_SMALL = "AmountTooSmall"
    AMOUNT_TOO_LARGE = "AmountTooLarge"
    SERVICE_ERROR = "ServiceError"
    TIMEOUT = "Timeout"
    TRANSPORT_ERROR = "TransportError"
    UNEXPECTED_RESPONSE_SHAPE = "UnexpectedResponseShape"


class LnurlPayError(Exception):
    """
    Base exception for all lnurl-pos failures.

    Attributes:
        kind: ErrorKind tag for this error
        message: Error description without context
        context: Optional prefix naming the step that failed
    """

    kind: ErrorKind = ErrorKind.UNEXPECTED_RESPONSE_SHAPE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: Optional[str] = None

    def __str__(self) -> str:
        if self.context:
            return f"{self.context}: {self.message}"
        return self.message

    def add_context(self, context: str) -> "LnurlPayError":
        """
        Attach a context prefix to this error.

        The first context wins: an error that already names the step it
        failed in keeps that name when it travels through outer layers.

        Args:
            context: Short description of the failing step

        Returns:
            This error, for use in a raise statement
        """
        if self.context is None:
            self.context = context
        return self


class InputValidationError(LnurlPayError):
    """Base class for caller-input errors. Never wrapped or retried."""
    pass


class MissingFieldError(InputValidationError):
    """Raised when a required option is absent or empty."""

    kind = ErrorKind.MISSING_FIELD

    def __init__(self, field: str):
        super().__init__(f"{field} is required")
        self.field = field


class InvalidAmountError(InputValidationError):
    """Raised when an amount is not a strictly positive whole number."""

    kind = ErrorKind.INVALID_AMOUNT

    def __init__(self, field: str = "amount"):
        super().__init__(f"{field} must be a positive integer")
        self.field = field


class InvalidAddressFormatError(InputValidationError):
    """Raised for a malformed Lightning address or unrecognised LNURL."""

    kind = ErrorKind.INVALID_ADDRESS_FORMAT

    def __init__(self, message: str = "Invalid Lightning address format"):
        super().__init__(message)


class InvalidCommentError(InputValidationError):
    """Raised when a comment is present but is not text."""

    kind = ErrorKind.INVALID_COMMENT

    def __init__(self):
        super().__init__("comment must be a string")


class OnionNotAllowedError(InputValidationError):
    """Raised when an .onion service is targeted without onion_allowed."""

    kind = ErrorKind.ONION_NOT_ALLOWED

    def __init__(self, url: str):
        super().__init__(f"Onion requests not allowed: {url}")
        self.url = url


class CommentTooLongError(InputValidationError):
    """
    Raised when a comment exceeds the allowed length.

    Attributes:
        limit: Maximum number of characters the service accepts
    """

    kind = ErrorKind.COMMENT_TOO_LONG

    def __init__(self, limit: int):
        super().__init__(f"Comment too long. Maximum: {limit} characters")
        self.limit = limit


class AmountTooSmallError(InputValidationError):
    """
    Raised when an amount is below the service minimum.

    Attributes:
        minimum: Smallest amount in sats the service accepts
    """

    kind = ErrorKind.AMOUNT_TOO_SMALL

    def __init__(self, minimum: int):
        super().__init__(f"Amount too small. Minimum: {minimum} sats")
        self.minimum = minimum


class AmountTooLargeError(InputValidationError):
    """
    Raised when an amount is above the service maximum.

    Attributes:
        maximum: Largest amount in sats the service accepts
    """

    kind = ErrorKind.AMOUNT_TOO_LARGE

    def __init__(self, maximum: int):
        super().__init__(f"Amount too large. Maximum: {maximum} sats")
        self.maximum = maximum


class ServiceError(LnurlPayError):
    """
    Raised when the provider answers with a non-success status.

    Attributes:
        reason: Provider-supplied reason, if any
        status_code: HTTP status code when the failure was an HTTP error
    """

    kind = ErrorKind.SERVICE_ERROR

    def __init__(self, reason: Optional[str] = None, status_code: Optional[int] = None):
        if reason:
            message = f"Service error: {reason}"
        elif status_code is not None:
            message = f"Service error: HTTP {status_code}"
        else:
            message = "Service error: unknown reason"
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code


class LnurlTimeoutError(LnurlPayError):
    """
    Raised when an HTTP call exceeds the configured timeout.

    Attributes:
        timeout: The configured timeout in seconds
    """

    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout: float):
        super().__init__(f"Request timed out after {timeout:g}s")
        self.timeout = timeout


class TransportError(LnurlPayError):
    """Raised for network, DNS or TLS failures."""

    kind = ErrorKind.TRANSPORT_ERROR


class UnexpectedResponseShapeError(LnurlPayError):
    """Raised when a provider response cannot be read as expected."""

    kind = ErrorKind.UNEXPECTED_RESPONSE_SHAPE
