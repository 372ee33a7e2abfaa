"""
Tests for lnurl_pos.types module.

Tests Pydantic models for ServiceParameters, InvoiceResult and
RequestOptions. Verifies alias handling, immutability and invariants.
"""

import pytest
from pydantic import ValidationError

from lnurl_pos.types import (
    DEFAULT_TIMEOUT,
    InvoiceResult,
    RequestOptions,
    ServiceParameters,
)


@pytest.fixture
def params_data():
    """ServiceParameters in lnurl-pay (camelCase) shape."""
    return {
        "callback": "https://bringin.xyz/cb",
        "fixed": False,
        "min": 20,
        "max": 100000,
        "domain": "bringin.xyz",
        "metadata": [["text/plain", "Coffee"]],
        "metadataHash": "ab" * 32,
        "identifier": "merchant@bringin.xyz",
        "description": "Coffee",
        "image": "",
        "commentAllowed": 144,
        "rawData": {"status": "OK"},
        "posMode": True,
    }


class TestServiceParameters:
    """Tests for ServiceParameters model."""

    def test_camel_case_alias(self, params_data):
        """Test that lnurl-pay JSON works via alias."""
        params = ServiceParameters.model_validate(params_data)
        assert params.callback_url == "https://bringin.xyz/cb"
        assert params.min_sendable_sats == 20
        assert params.max_sendable_sats == 100000
        assert params.max_comment_length == 144
        assert params.pos_mode is True

    def test_serialization_uses_alias(self, params_data):
        """Test that serialization reproduces the lnurl-pay shape."""
        params = ServiceParameters.model_validate(params_data)
        assert params.model_dump(by_alias=True) == params_data

    def test_defaults(self):
        """Test optional field defaults."""
        params = ServiceParameters(
            callback_url="https://example.com/cb",
            is_amount_fixed=True,
            min_sendable_sats=10,
            max_sendable_sats=10,
            domain="example.com",
            metadata_hash="00" * 32,
            identifier="alice@example.com",
        )
        assert params.metadata == []
        assert params.description == "Payment"
        assert params.image == ""
        assert params.max_comment_length == 0
        assert params.raw_provider_response == {}
        assert params.pos_mode is False

    def test_min_above_max_rejected(self, params_data):
        """Test the min <= max invariant."""
        params_data["min"] = 200001
        params_data["max"] = 200000
        with pytest.raises(ValidationError):
            ServiceParameters.model_validate(params_data)

    def test_negative_bounds_rejected(self, params_data):
        """Test that bounds cannot be negative."""
        params_data["min"] = -1
        with pytest.raises(ValidationError):
            ServiceParameters.model_validate(params_data)

    def test_immutable(self, params_data):
        """Test that parameters cannot be modified after creation."""
        params = ServiceParameters.model_validate(params_data)
        with pytest.raises(ValidationError):
            params.min_sendable_sats = 1


class TestInvoiceResult:
    """Tests for InvoiceResult model."""

    def test_defaults(self):
        """Test that validity flags default to True."""
        result = InvoiceResult(invoice="lnbc1...")
        assert result.service_parameters is None
        assert result.success_action is None
        assert result.raw_provider_response == {}
        assert result.has_valid_amount is True
        assert result.has_valid_description_hash is True

    def test_validate_preimage_is_placeholder(self):
        """Test that the preimage placeholder accepts anything."""
        result = InvoiceResult(invoice="lnbc1...")
        assert result.validate_preimage("00" * 32) is True
        assert result.validate_preimage("not-a-preimage") is True

    def test_serialization_uses_alias(self):
        """Test lnurl-pay field names on output."""
        result = InvoiceResult(
            invoice="lnbc1...",
            success_action={"tag": "message", "message": "Thanks"},
            raw_provider_response={"pr": "lnbc1..."},
        )
        data = result.model_dump(by_alias=True)
        assert data["successAction"] == {"tag": "message", "message": "Thanks"}
        assert data["rawData"] == {"pr": "lnbc1..."}
        assert data["hasValidAmount"] is True
        assert data["params"] is None


class TestRequestOptions:
    """Tests for RequestOptions model."""

    def test_defaults(self):
        """Test default option values."""
        options = RequestOptions(ln_url_or_address="alice@example.com")
        assert options.amount is None
        assert options.comment is None
        assert options.pos_mode is False
        assert options.onion_allowed is False
        assert options.http_get is None
        assert options.timeout == DEFAULT_TIMEOUT == 30.0

    def test_lnurl_pay_aliases(self):
        """Test the lnurl-pay option names."""
        options = RequestOptions.model_validate({
            "lnUrlOrAddress": "merchant@bringin.xyz",
            "tokens": 50,
            "posMode": True,
            "onionAllowed": True,
        })
        assert options.ln_url_or_address == "merchant@bringin.xyz"
        assert options.amount == 50
        assert options.pos_mode is True
        assert options.onion_allowed is True

    def test_http_get_excluded_from_dump(self):
        """Test that the GET capability is not serialized."""
        async def http_get(url):
            return {}

        options = RequestOptions(ln_url_or_address="a@b.com", http_get=http_get)
        assert options.http_get is http_get
        assert "http_get" not in options.model_dump()

    def test_timeout_must_be_positive(self):
        """Test that a zero timeout is rejected."""
        with pytest.raises(ValidationError):
            RequestOptions(ln_url_or_address="a@b.com", timeout=0)

    def test_immutable(self):
        """Test that options cannot be modified."""
        options = RequestOptions(ln_url_or_address="a@b.com")
        with pytest.raises(ValidationError):
            options.pos_mode = True
