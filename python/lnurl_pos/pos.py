"""
Location: python/lnurl_pos/pos.py

Summary:
    POS-mode variant of the LNURL-pay flow. The discovery request carries a
    pos=true flag, which makes the provider answer with much lower minimum
    amounts (tens of sats instead of tens of thousands).

Usage:
    Used by client.py when pos_mode is requested for a Lightning address,
    and when requesting invoices for parameters that came from a POS
    provider.

Example:
    from lnurl_pos.pos import request_pay_service_params
    from lnurl_pos.types import RequestOptions

    options = RequestOptions(ln_url_or_address="merchant@bringin.xyz", pos_mode=True)
    params = await request_pay_service_params(options, http_get)
    params.min_sendable_sats  # 20
"""

import logging
from typing import Any, Optional

from .lnurl import strip_lightning_prefix
from .standard import (
    MSAT_PER_SAT,
    PAY_REQUEST_TAG,
    build_invoice_result,
    build_service_parameters,
    ensure_ok,
)
from .transport import (
    HttpGet,
    add_query_params,
    build_discovery_url,
    ensure_onion_allowed,
    fetch_json,
    host_of,
)
from .types import InvoiceResult, RequestOptions, ServiceParameters
from .validation import validate_address


logger = logging.getLogger(__name__)

# Providers whose callbacks serve POS-mode invoices
POS_PROVIDER_HOSTS = ("bringin.xyz",)


def is_pos_parameters(params: ServiceParameters) -> bool:
    """
    Check whether parameters came from the POS flow.

    Parameters resolved in POS mode are always POS. Otherwise the callback
    host of the provider response is matched against POS_PROVIDER_HOSTS.

    Args:
        params: Resolved service parameters

    Returns:
        True if invoices should be requested the POS way
    """
    if params.pos_mode:
        return True
    callback = params.raw_provider_response.get("callback") or params.callback_url
    host = host_of(callback) if isinstance(callback, str) else ""
    return any(host == pos_host or host.endswith("." + pos_host) for pos_host in POS_PROVIDER_HOSTS)


async def request_pay_service_params(options: RequestOptions, http_get: HttpGet) -> ServiceParameters:
    """
    Fetch POS-mode pay service parameters for a Lightning address.

    Args:
        options: Effective request options (pos_mode is implied)
        http_get: GET capability

    Returns:
        ServiceParameters with pos_mode set

    Raises:
        InvalidAddressFormatError: If the address is malformed
        OnionNotAllowedError: For .onion domains without onion_allowed
        ServiceError: If the status is not "OK", or is missing from a
            response that is not a pay request
        UnexpectedResponseShapeError: If the response cannot be normalized
    """
    local, domain = validate_address(strip_lightning_prefix(options.ln_url_or_address))
    url = build_discovery_url(local, domain, pos=True)
    ensure_onion_allowed(url, options.onion_allowed)

    data = await fetch_json(url, http_get, options.timeout)
    # status may be omitted from a payRequest
    ensure_ok(data, required=data.get("tag") != PAY_REQUEST_TAG)

    params = build_service_parameters(
        data,
        url=url,
        identifier=options.ln_url_or_address,
        pos_mode=True,
    )
    logger.debug(
        "Resolved POS parameters on %s: %d-%d sats",
        params.domain,
        params.min_sendable_sats,
        params.max_sendable_sats,
    )
    return params


async def request_invoice(
    params: ServiceParameters,
    amount: int,
    comment: Optional[str],
    http_get: HttpGet,
    timeout: float,
    onion_allowed: bool = False,
) -> InvoiceResult:
    """
    Request an invoice from a POS provider callback.

    Args:
        params: POS service parameters
        amount: Amount in sats, already checked against the bounds
        comment: Optional payer comment, sent URL-encoded
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
    if comment:
        query["comment"] = comment

    data = await fetch_json(add_query_params(params.callback_url, query), http_get, timeout)
    return build_invoice_result(data)
