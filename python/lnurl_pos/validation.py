"""
Location: python/lnurl_pos/validation.py

Summary:
    Input validation run before any network call. Each check raises a
    specific InputValidationError subclass so callers can react to the
    exact problem.

Usage:
    Used by client.py on every public operation, and by pos.py to split
    Lightning addresses.

Example:
    from lnurl_pos.validation import validate_address, validate_amount

    local, domain = validate_address("merchant@bringin.xyz")
    validate_amount(50)
"""

from typing import Any, Optional, TYPE_CHECKING

from .errors import (
    AmountTooLargeError,
    AmountTooSmallError,
    CommentTooLongError,
    InvalidAddressFormatError,
    InvalidAmountError,
    InvalidCommentError,
    MissingFieldError,
)

if TYPE_CHECKING:
    from .types import ServiceParameters


# Hard cap applied by the one-call request_invoice before resolution
MAX_COMMENT_LENGTH = 144


def require(value: Any, field: str) -> None:
    """
    Check that a required option is present.

    Args:
        value: Option value
        field: Option name used in the error message

    Raises:
        MissingFieldError: If value is None or an empty string
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingFieldError(field)


def validate_amount(amount: Any, field: str = "amount") -> int:
    """
    Check that an amount is a strictly positive whole number of sats.

    Args:
        amount: Amount in satoshis
        field: Option name used in the error message

    Returns:
        The amount, unchanged

    Raises:
        InvalidAmountError: For zero, negatives, floats, bools or non-numbers
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError(field)
    return amount


def split_address(value: Any) -> Optional[tuple[str, str]]:
    """Split local@domain, or return None when value is not a valid address."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split("@")
    if len(parts) != 2:
        return None
    local, domain = parts
    if not local or not domain or "." not in domain:
        return None
    return local, domain.lower()


def is_lightning_address(value: Any) -> bool:
    """Check whether value has the local@domain.tld form."""
    return split_address(value) is not None


def validate_address(value: Any, field: str = "ln_url_or_address") -> tuple[str, str]:
    """
    Validate a Lightning address and split it.

    Args:
        value: Address such as "user@sub.domain.com"
        field: Option name used in the error message

    Returns:
        Tuple of (local_part, domain_part)

    Raises:
        MissingFieldError: If value is None or empty
        InvalidAddressFormatError: If value is not local@domain.tld
    """
    require(value, field)
    parts = split_address(value)
    if parts is None:
        raise InvalidAddressFormatError()
    return parts


def validate_comment(comment: Any, max_length: int) -> None:
    """
    Check an optional comment against a maximum length.

    Args:
        comment: Comment text, None or empty for no comment
        max_length: Maximum number of characters allowed

    Raises:
        InvalidCommentError: If comment is present but not a string
        CommentTooLongError: If comment is longer than max_length
    """
    if comment is None or comment == "":
        return
    if not isinstance(comment, str):
        raise InvalidCommentError()
    if len(comment) > max_length:
        raise CommentTooLongError(max_length)


def validate_amount_bounds(amount: int, params: "ServiceParameters") -> None:
    """
    Check an amount against the service's sendable range.

    Args:
        amount: Amount in satoshis
        params: Resolved service parameters

    Raises:
        AmountTooSmallError: If amount is below min_sendable_sats
        AmountTooLargeError: If amount is above max_sendable_sats
    """
    if amount < params.min_sendable_sats:
        raise AmountTooSmallError(params.min_sendable_sats)
    if amount > params.max_sendable_sats:
        raise AmountTooLargeError(params.max_sendable_sats)
