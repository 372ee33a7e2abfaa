"""
Location: python/lnurl_pos/standard.py

Summary:
    Standard LNURL-pay client (LUD-06, LUD-12, LUD-16). Resolves any
    supported identifier to its pay service parameters and requests
    invoices from the service callback. Also holds the response parsing
    shared with the POS flow in pos.py.

Usage:
    Used by client.py for every request that is not in POS mode, and for
    POS-mode requests whose identifier is not a Lightning address.

Example:
    from lnurl_pos.standard import request_pay_service_params
    from lnurl_pos.types import RequestOptions

    options = RequestOptions(ln_url_or_address="alice@example.com")
    params = await request_pay_service_params(options, http_get)
"""

import logging
import math
from typing import Any, Optional

from pydantic import ValidationError

from .errors import ServiceError, UnexpectedResponseShapeError
from .lnurl import resolve_url
from .metadata import description, image, metadata_hash, parse_metadata
from .transport import HttpGet, add_query_params, ensure_onion_allowed, fetch_json, host_of
from .types import InvoiceResult, RequestOptions, ServiceParameters


logger = logging.getLogger(__name__)

PAY_REQUEST_TAG = "payRequest"

MSAT_PER_SAT = 1000


def ensure_ok(data: dict[str, Any], required: bool = False) -> None:
    """
    Check the LNURL status field of a response.

    Args:
        data: Decoded response body
        required: Treat a missing status as a failure

    Raises:
        ServiceError: If the status is not "OK", with the provider reason
    """
    status = data.get("status")
    if status is None and not required:
        return
    if not isinstance(status, str) or status.upper() != "OK":
        reason = data.get("reason")
        logger.warning("Pay service returned status %r: %s", status, reason)
        raise ServiceError(reason if isinstance(reason, str) else None)


def _msat_to_sats(data: dict[str, Any], key: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise UnexpectedResponseShapeError(f"{key} must be a non-negative number, got {value!r}")
    # json.loads accepts NaN and Infinity
    if (isinstance(value, float) and not math.isfinite(value)) or value < 0:
        raise UnexpectedResponseShapeError(f"{key} must be a non-negative number, got {value!r}")
    return int(value) // MSAT_PER_SAT


def build_service_parameters(
    data: dict[str, Any],
    *,
    url: str,
    identifier: str,
    pos_mode: bool = False,
) -> ServiceParameters:
    """
    Normalize a discovery response into ServiceParameters.

    Args:
        data: Decoded discovery response
        url: URL the response was fetched from
        identifier: Address or LNURL given by the caller
        pos_mode: Whether the parameters were requested in POS mode

    Returns:
        ServiceParameters with bounds in sats and derived metadata fields

    Raises:
        UnexpectedResponseShapeError: If required fields are missing or invalid
    """
    callback = data.get("callback")
    if not isinstance(callback, str) or not callback:
        raise UnexpectedResponseShapeError("Pay service response has no callback")

    min_sats = _msat_to_sats(data, "minSendable")
    max_sats = _msat_to_sats(data, "maxSendable")
    if min_sats > max_sats:
        raise UnexpectedResponseShapeError(
            f"minSendable ({min_sats} sats) exceeds maxSendable ({max_sats} sats)"
        )

    raw_metadata = data.get("metadata")
    metadata = parse_metadata(raw_metadata)

    comment_allowed = data.get("commentAllowed", 0)
    if isinstance(comment_allowed, bool) or not isinstance(comment_allowed, int) or comment_allowed < 0:
        comment_allowed = 0

    try:
        return ServiceParameters(
            callback_url=callback,
            is_amount_fixed=min_sats == max_sats,
            min_sendable_sats=min_sats,
            max_sendable_sats=max_sats,
            domain=host_of(url),
            metadata=metadata,
            metadata_hash=metadata_hash(raw_metadata),
            identifier=identifier,
            description=description(metadata),
            image=image(metadata),
            max_comment_length=comment_allowed,
            raw_provider_response=data,
            pos_mode=pos_mode,
        )
    except ValidationError as exc:
        raise UnexpectedResponseShapeError(f"Invalid pay service parameters: {exc}") from exc


def build_invoice_result(data: dict[str, Any]) -> InvoiceResult:
    """
    Normalize a callback response into an InvoiceResult.

    Args:
        data: Decoded callback response

    Returns:
        InvoiceResult without service parameters attached

    Raises:
        ServiceError: If the provider reported an error
        UnexpectedResponseShapeError: If there is no payment request
    """
    ensure_ok(data)

    invoice = data.get("pr")
    if not isinstance(invoice, str) or not invoice:
        raise UnexpectedResponseShapeError("Callback response has no payment request (pr)")

    success_action = data.get("successAction")
    return InvoiceResult(
        invoice=invoice,
        success_action=success_action if isinstance(success_action, dict) else None,
        raw_provider_response=data,
    )


async def request_pay_service_params(
    options: RequestOptions,
    http_get: HttpGet,
    query: Optional[dict[str, str]] = None,
) -> ServiceParameters:
    """
    Fetch pay service parameters for any supported identifier.

    Args:
        options: Effective request options
        http_get: GET capability
        query: Extra query parameters for the discovery URL

    Returns:
        Normalized ServiceParameters

    Raises:
        InputValidationError: If the identifier cannot be resolved
        ServiceError: If the service reports an error
        UnexpectedResponseShapeError: If the response is not a pay request
    """
    url = resolve_url(options.ln_url_or_address, options.onion_allowed)
    if query:
        url = add_query_params(url, query)

    data = await fetch_json(url, http_get, options.timeout)
    ensure_ok(data)
    if data.get("tag") != PAY_REQUEST_TAG:
        raise UnexpectedResponseShapeError(
            f"Expected tag {PAY_REQUEST_TAG!r}, got {data.get('tag')!r}"
        )

    params = build_service_parameters(
        data,
        url=url,
        identifier=options.ln_url_or_address,
        pos_mode=options.pos_mode,
    )
    logger.debug(
        "Resolved pay service on %s: %d-%d sats",
        params.domain,
        params.min_sendable_sats,
        params.max_sendable_sats,
    )
    return params


async def request_invoice_with_service_params(
    params: ServiceParameters,
    amount: int,
    comment: Optional[str],
    http_get: HttpGet,
    timeout: float,
    onion_allowed: bool = False,
) -> InvoiceResult:
    """
    Request an invoice from a standard pay service callback.

    The comment is only sent when the service accepts comments (LUD-12).

    Args:
        params: Resolved service parameters
        amount: Amount in sats, already checked against the bounds
        comment: Optional payer comment
        http_get: GET capability
        timeout: Seconds before the request is cancelled
        onion_allowed: Allow a .onion callback

    Returns:
        InvoiceResult without service parameters attached

    Raises:
        OnionNotAllowedError: If the callback is .onion and not allowed
    """
    ensure_onion_allowed(params.callback_url, onion_allowed)

    query: dict[str, Any] = {"amount": amount * MSAT_PER_SAT}
    if comment and params.max_comment_length > 0:
        query["comment"] = comment

    data = await fetch_json(add_query_params(params.callback_url, query), http_get, timeout)
    return build_invoice_result(data)
