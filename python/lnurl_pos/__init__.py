"""
Location: python/lnurl_pos/__init__.py

Summary:
    Main package initialization for lnurl-pos. Exports the client, the
    one-shot request functions, the record models, the metadata helpers
    and the error hierarchy.

Usage:
    from lnurl_pos import request_invoice, resolve_service_parameters

    # POS mode: 20+ sats instead of the standard minimum
    result = await request_invoice("merchant@bringin.xyz", 50, pos_mode=True)

    # Two-step flow with a shared client
    from lnurl_pos import LnurlPayClient

    async with LnurlPayClient() as client:
        params = await client.resolve_service_parameters("alice@example.com")
        result = await client.request_invoice_with_parameters(params, 25000)

Version: 0.1.0
"""

from .client import (
    LnurlPayClient,
    request_invoice,
    request_invoice_with_parameters,
    request_invoice_with_service_params,
    request_pay_service_params,
    resolve_service_parameters,
)
from .types import InvoiceResult, RequestOptions, ServiceParameters
from .metadata import (
    calculate_metadata_hash,
    description,
    extract_image,
    image,
    metadata_hash,
    parse_description,
)
from .errors import (
    AmountTooLargeError,
    AmountTooSmallError,
    CommentTooLongError,
    ErrorKind,
    InputValidationError,
    InvalidAddressFormatError,
    InvalidAmountError,
    InvalidCommentError,
    LnurlPayError,
    LnurlTimeoutError,
    MissingFieldError,
    OnionNotAllowedError,
    ServiceError,
    TransportError,
    UnexpectedResponseShapeError,
)
from .transport import HttpGet, HttpxGet

__version__ = "0.1.0"

__all__ = [
    # Main client
    "LnurlPayClient",
    # One-shot operations
    "resolve_service_parameters",
    "request_invoice",
    "request_invoice_with_parameters",
    "request_pay_service_params",
    "request_invoice_with_service_params",
    # Types
    "ServiceParameters",
    "InvoiceResult",
    "RequestOptions",
    # Metadata helpers
    "description",
    "image",
    "metadata_hash",
    "parse_description",
    "extract_image",
    "calculate_metadata_hash",
    # Exceptions
    "ErrorKind",
    "LnurlPayError",
    "InputValidationError",
    "MissingFieldError",
    "InvalidAmountError",
    "InvalidAddressFormatError",
    "InvalidCommentError",
    "OnionNotAllowedError",
    "CommentTooLongError",
    "AmountTooSmallError",
    "AmountTooLargeError",
    "ServiceError",
    "LnurlTimeoutError",
    "TransportError",
    "UnexpectedResponseShapeError",
    # Transport
    "HttpGet",
    "HttpxGet",
]
