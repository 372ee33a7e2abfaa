"""
Location: python/lnurl_pos/types.py

Summary:
    Pydantic models for lnurl-pos. Defines ServiceParameters (the resolved
    pay-service record), InvoiceResult (the outcome of an invoice request)
    and RequestOptions (the effective configuration of a single call).

Usage:
    Field names are snake_case; aliases follow the camelCase keys used by
    the JavaScript lnurl-pay library so model_dump(by_alias=True) yields the
    same shape. All models are frozen: a record is created once per call
    and never modified.

Example:
    from lnurl_pos.types import ServiceParameters

    params = ServiceParameters.model_validate({
        "callback": "https://bringin.xyz/cb",
        "min": 20,
        "max": 100000,
        ...
    })
"""

from typing import Any, Callable, Optional

from pydantic import BaseModel, Field, model_validator


DEFAULT_TIMEOUT = 30.0


class ServiceParameters(BaseModel):
    """
    Parameters of an LNURL-pay service, normalized from the discovery response.

    Attributes:
        callback_url: URL to request invoices from
        is_amount_fixed: True when the service accepts exactly one amount
        min_sendable_sats: Smallest payable amount in sats
        max_sendable_sats: Largest payable amount in sats
        domain: Host the parameters were discovered on
        metadata: Ordered [content_type, payload] entries
        metadata_hash: SHA-256 hex of the metadata as received
        identifier: The Lightning address or LNURL that was resolved
        description: text/plain metadata entry, or "Payment"
        image: image/* metadata payload, or ""
        max_comment_length: Characters allowed in a comment (0 = none)
        raw_provider_response: Discovery response as received
        pos_mode: Whether the parameters were requested in POS mode
    """
    callback_url: str = Field(alias="callback")
    is_amount_fixed: bool = Field(alias="fixed")
    min_sendable_sats: int = Field(alias="min", ge=0)
    max_sendable_sats: int = Field(alias="max", ge=0)
    domain: str
    metadata: list[list[Any]] = Field(default_factory=list)
    metadata_hash: str = Field(alias="metadataHash")
    identifier: str
    description: str = "Payment"
    image: str = ""
    max_comment_length: int = Field(0, alias="commentAllowed", ge=0)
    raw_provider_response: dict[str, Any] = Field(default_factory=dict, alias="rawData")
    pos_mode: bool = Field(False, alias="posMode")

    model_config = {"populate_by_name": True, "frozen": True}

    @model_validator(mode="after")
    def _check_bounds(self) -> "ServiceParameters":
        if self.min_sendable_sats > self.max_sendable_sats:
            raise ValueError(
                f"minSendable ({self.min_sendable_sats}) exceeds maxSendable ({self.max_sendable_sats})"
            )
        return self


class InvoiceResult(BaseModel):
    """
    Invoice returned by a pay service callback.

    Attributes:
        invoice: BOLT11 payment request
        service_parameters: Parameters the invoice was requested with
            (None on the request_invoice_with_parameters path)
        success_action: Provider-defined success action, passed through
        raw_provider_response: Callback response as received
        has_valid_amount: Always True, amounts are checked before requesting
        has_valid_description_hash: Always True, the invoice is not decoded
    """
    invoice: str
    service_parameters: Optional[ServiceParameters] = Field(None, alias="params")
    success_action: Optional[dict[str, Any]] = Field(None, alias="successAction")
    raw_provider_response: dict[str, Any] = Field(default_factory=dict, alias="rawData")
    has_valid_amount: bool = Field(True, alias="hasValidAmount")
    has_valid_description_hash: bool = Field(True, alias="hasValidDescriptionHash")

    model_config = {"populate_by_name": True, "frozen": True}

    def validate_preimage(self, preimage: str) -> bool:
        """
        Placeholder preimage check kept for lnurl-pay API compatibility.

        This is NOT a cryptographic check: the preimage is not hashed or
        compared with the invoice payment hash, and the result is always True.

        Args:
            preimage: Payment preimage (hex)

        Returns:
            True
        """
        return True


class RequestOptions(BaseModel):
    """
    Effective configuration for one call.

    Built fresh from client defaults and per-call overrides after input
    validation; never mutated.

    Attributes:
        ln_url_or_address: Lightning address, LNURL or pay URL
        amount: Amount in sats (None for resolution-only calls)
        comment: Optional payer comment
        pos_mode: Request POS-mode parameters (lower minimums)
        onion_allowed: Allow requests to .onion services
        http_get: Custom GET capability, returns decoded JSON
        timeout: Per-request timeout in seconds
    """
    ln_url_or_address: str = Field(alias="lnUrlOrAddress")
    amount: Optional[int] = Field(None, alias="tokens")
    comment: Optional[str] = None
    pos_mode: bool = Field(False, alias="posMode")
    onion_allowed: bool = Field(False, alias="onionAllowed")
    http_get: Optional[Callable[..., Any]] = Field(None, alias="fetchGet", exclude=True)
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)

    model_config = {"populate_by_name": True, "frozen": True}
