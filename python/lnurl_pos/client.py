"""
Location: python/lnurl_pos/client.py

Summary:
    Main LnurlPayClient class for lnurl-pos. Runs the two-step LNURL-pay
    flow (resolve service parameters, then request an invoice) with an
    optional POS mode that unlocks lower minimum amounts.

Usage:
    The primary entry point for the package. Use a client when making
    several requests, or the module-level one-shot functions which create
    and close a client per call. Standard requests behave exactly like the
    JavaScript lnurl-pay library; pos_mode=True switches Lightning address
    resolution to the POS endpoint.

Example:
    from lnurl_pos import LnurlPayClient

    async with LnurlPayClient(timeout=10.0) as client:
        params = await client.resolve_service_parameters(
            "merchant@bringin.xyz", pos_mode=True
        )
        result = await client.request_invoice_with_parameters(params, 50)
        print(result.invoice)
"""

import logging
from typing import Any, Optional

import httpx

from . import pos, standard
from .errors import InputValidationError, InvalidAddressFormatError, LnurlPayError
from .lnurl import has_url_scheme, strip_lightning_prefix
from .transport import POS_QUERY, HttpGet, HttpxGet
from .types import DEFAULT_TIMEOUT, InvoiceResult, RequestOptions, ServiceParameters
from .validation import (
    MAX_COMMENT_LENGTH,
    require,
    validate_amount,
    validate_amount_bounds,
    validate_comment,
)


logger = logging.getLogger(__name__)

# Context prefixes naming the step that failed
PARAMS_CONTEXT = "Failed to get service params"
POS_PARAMS_CONTEXT = "POS service parameter failure"
INVOICE_CONTEXT = "Invoice request failed"
POS_INVOICE_CONTEXT = "POS invoice request failed"


class LnurlPayClient:
    """
    LNURL-pay client with POS mode support.

    Every public method validates its input before any network call and
    raises InputValidationError subclasses unwrapped. Service, timeout,
    transport and response-shape errors carry a context prefix naming the
    step that failed. Nothing is retried or cached.

    Attributes:
        timeout: Default per-request timeout in seconds
        onion_allowed: Default for allowing .onion services
        http_get: Default GET capability
    """

    def __init__(
        self,
        http_get: Optional[HttpGet] = None,
        timeout: float = DEFAULT_TIMEOUT,
        onion_allowed: bool = False,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the LnurlPayClient.

        Args:
            http_get: Optional custom GET capability returning decoded JSON
                (uses httpx by default)
            timeout: Request timeout in seconds (default 30)
            onion_allowed: Allow requests to .onion services (default False)
            http_client: Optional httpx.AsyncClient to send requests with;
                the client is not closed by close() when injected,
                and its own httpx timeout still applies
        """
        self.timeout = timeout
        self.onion_allowed = onion_allowed

        # Deadlines are enforced per call by fetch_json, not by httpx
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(None))
        self.http_get: HttpGet = http_get or HttpxGet(self._http)

    async def close(self) -> None:
        """
        Close the HTTP client and release resources.

        Should be called when done with the client, or use
        the async context manager pattern.
        """
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "LnurlPayClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context manager and close resources."""
        await self.close()

    async def resolve_service_parameters(
        self,
        ln_url_or_address: str,
        *,
        pos_mode: bool = False,
        onion_allowed: Optional[bool] = None,
        http_get: Optional[HttpGet] = None,
        timeout: Optional[float] = None,
    ) -> ServiceParameters:
        """
        Resolve the pay service parameters for an address or LNURL.

        Without pos_mode, or for identifiers that are not Lightning
        addresses, this is the standard LNURL-pay resolution. With pos_mode
        a Lightning address is resolved on the provider's POS endpoint.

        Args:
            ln_url_or_address: Lightning address, LNURL or pay URL
            pos_mode: Request POS-mode parameters
            onion_allowed: Override the client's onion setting
            http_get: Override the client's GET capability
            timeout: Override the client's timeout (seconds)

        Returns:
            ServiceParameters for the service

        Raises:
            InputValidationError: If the identifier is missing or malformed
            LnurlPayError: For service, timeout, transport or shape failures
        """
        self._require_identifier(ln_url_or_address)
        options = self._options(
            ln_url_or_address,
            pos_mode=pos_mode,
            onion_allowed=onion_allowed,
            http_get=http_get,
            timeout=timeout,
        )
        return await self._resolve(options)

    async def request_invoice(
        self,
        ln_url_or_address: str,
        amount: int,
        *,
        comment: Optional[str] = None,
        pos_mode: bool = False,
        onion_allowed: Optional[bool] = None,
        http_get: Optional[HttpGet] = None,
        timeout: Optional[float] = None,
    ) -> InvoiceResult:
        """
        Resolve the service and request an invoice in one call.

        Args:
            ln_url_or_address: Lightning address, LNURL or pay URL
            amount: Amount in sats
            comment: Optional payer comment (at most 144 characters)
            pos_mode: Request POS-mode parameters
            onion_allowed: Override the client's onion setting
            http_get: Override the client's GET capability
            timeout: Override the client's timeout (seconds)

        Returns:
            InvoiceResult including the resolved service parameters

        Raises:
            InputValidationError: For invalid input or out-of-range amounts
            LnurlPayError: For service, timeout, transport or shape failures
        """
        self._require_identifier(ln_url_or_address)
        validate_amount(amount)
        validate_comment(comment, MAX_COMMENT_LENGTH)

        options = self._options(
            ln_url_or_address,
            amount=amount,
            comment=comment,
            pos_mode=pos_mode,
            onion_allowed=onion_allowed,
            http_get=http_get,
            timeout=timeout,
        )
        params = await self._resolve(options)
        validate_amount_bounds(amount, params)
        validate_comment(comment, params.max_comment_length)

        result = await self._request(params, options)
        return result.model_copy(update={"service_parameters": params})

    async def request_invoice_with_parameters(
        self,
        params: ServiceParameters,
        amount: int,
        comment: Optional[str] = None,
        timeout: Optional[float] = None,
        *,
        http_get: Optional[HttpGet] = None,
        onion_allowed: Optional[bool] = None,
    ) -> InvoiceResult:
        """
        Request an invoice using already resolved service parameters.

        Args:
            params: Parameters from resolve_service_parameters
            amount: Amount in sats
            comment: Optional payer comment
            timeout: Override the client's timeout (seconds)
            http_get: Override the client's GET capability
            onion_allowed: Override the client's onion setting for the
                callback

        Returns:
            InvoiceResult without service parameters attached

        Raises:
            MissingFieldError: If params is missing
            InvalidAmountError: If amount is not a positive integer
            AmountTooSmallError: If amount is below the service minimum
            AmountTooLargeError: If amount is above the service maximum
            CommentTooLongError: If the comment exceeds the service limit
            OnionNotAllowedError: If the callback is .onion and not allowed
            LnurlPayError: For service, timeout, transport or shape failures
        """
        require(params, "params")
        validate_amount(amount)
        validate_amount_bounds(amount, params)
        validate_comment(comment, params.max_comment_length)

        options = self._options(
            params.identifier,
            amount=amount,
            comment=comment,
            pos_mode=params.pos_mode,
            onion_allowed=onion_allowed,
            http_get=http_get,
            timeout=timeout,
        )
        return await self._request(params, options)

    async def _resolve(self, options: RequestOptions) -> ServiceParameters:
        """
        Route parameter resolution to the POS or standard flow.

        Args:
            options: Effective request options

        Returns:
            Resolved ServiceParameters
        """
        http_get = options.http_get or self.http_get
        target = strip_lightning_prefix(options.ln_url_or_address)
        context = POS_PARAMS_CONTEXT if options.pos_mode else PARAMS_CONTEXT

        try:
            if options.pos_mode and not has_url_scheme(target) and "@" in target:
                return await pos.request_pay_service_params(options, http_get)

            # POS flag travels as a query parameter on explicit URLs
            query = POS_QUERY if options.pos_mode and has_url_scheme(target) else None
            return await standard.request_pay_service_params(options, http_get, query)
        except InputValidationError:
            raise
        except LnurlPayError as exc:
            logger.debug("%s: %s", context, exc)
            raise exc.add_context(context)

    async def _request(self, params: ServiceParameters, options: RequestOptions) -> InvoiceResult:
        """
        Route the invoice request to the POS or standard flow.

        Args:
            params: Resolved service parameters
            options: Effective request options with amount and comment

        Returns:
            InvoiceResult without service parameters attached
        """
        http_get = options.http_get or self.http_get
        pos_path = pos.is_pos_parameters(params)
        context = POS_INVOICE_CONTEXT if pos_path else INVOICE_CONTEXT
        logger.debug(
            "Requesting %d sat invoice from %s (pos=%s)", options.amount, params.domain, pos_path
        )

        try:
            if pos_path:
                return await pos.request_invoice(
                    params,
                    options.amount,
                    options.comment,
                    http_get,
                    options.timeout,
                    onion_allowed=options.onion_allowed,
                )
            return await standard.request_invoice_with_service_params(
                params,
                options.amount,
                options.comment,
                http_get,
                options.timeout,
                onion_allowed=options.onion_allowed,
            )
        except InputValidationError:
            raise
        except LnurlPayError as exc:
            logger.debug("%s: %s", context, exc)
            raise exc.add_context(context)

    def _options(self, ln_url_or_address: str, **overrides: Any) -> RequestOptions:
        """
        Derive the effective options for one call.

        None overrides fall back to the client's defaults.

        Args:
            ln_url_or_address: Identifier for the call
            **overrides: Per-call option values

        Returns:
            New RequestOptions
        """
        defaults = {
            "onion_allowed": self.onion_allowed,
            "timeout": self.timeout,
        }
        values = {**defaults, **{k: v for k, v in overrides.items() if v is not None}}
        return RequestOptions(ln_url_or_address=ln_url_or_address, **values)

    @staticmethod
    def _require_identifier(ln_url_or_address: Any) -> None:
        require(ln_url_or_address, "ln_url_or_address")
        if not isinstance(ln_url_or_address, str):
            raise InvalidAddressFormatError("ln_url_or_address must be a string")


async def resolve_service_parameters(
    ln_url_or_address: str,
    *,
    pos_mode: bool = False,
    onion_allowed: bool = False,
    http_get: Optional[HttpGet] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ServiceParameters:
    """
    One-shot parameter resolution.

    Creates a temporary client, resolves the parameters and closes it.
    See LnurlPayClient.resolve_service_parameters.
    """
    async with LnurlPayClient(http_get=http_get, timeout=timeout, onion_allowed=onion_allowed) as client:
        return await client.resolve_service_parameters(ln_url_or_address, pos_mode=pos_mode)


async def request_invoice(
    ln_url_or_address: str,
    amount: int,
    *,
    comment: Optional[str] = None,
    pos_mode: bool = False,
    onion_allowed: bool = False,
    http_get: Optional[HttpGet] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> InvoiceResult:
    """
    One-shot invoice request.

    Creates a temporary client, runs both protocol steps and closes it.
    See LnurlPayClient.request_invoice.
    """
    async with LnurlPayClient(http_get=http_get, timeout=timeout, onion_allowed=onion_allowed) as client:
        return await client.request_invoice(
            ln_url_or_address, amount, comment=comment, pos_mode=pos_mode
        )


async def request_invoice_with_parameters(
    params: ServiceParameters,
    amount: int,
    comment: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    *,
    http_get: Optional[HttpGet] = None,
    onion_allowed: bool = False,
) -> InvoiceResult:
    """
    One-shot invoice request for already resolved parameters.

    See LnurlPayClient.request_invoice_with_parameters.
    """
    async with LnurlPayClient(http_get=http_get, timeout=timeout, onion_allowed=onion_allowed) as client:
        return await client.request_invoice_with_parameters(params, amount, comment)


# Names used by the JavaScript lnurl-pay API
request_pay_service_params = resolve_service_parameters
request_invoice_with_service_params = request_invoice_with_parameters
