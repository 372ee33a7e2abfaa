"""
Tests for lnurl_pos.validation module.

Tests required-field, amount, Lightning address, comment and amount
bounds validation, including the error kinds raised.
"""

import pytest

from lnurl_pos.errors import (
    AmountTooLargeError,
    AmountTooSmallError,
    CommentTooLongError,
    ErrorKind,
    InvalidAddressFormatError,
    InvalidAmountError,
    InvalidCommentError,
    MissingFieldError,
)
from lnurl_pos.types import ServiceParameters
from lnurl_pos.validation import (
    is_lightning_address,
    require,
    validate_address,
    validate_amount,
    validate_amount_bounds,
    validate_comment,
)


@pytest.fixture
def params():
    """Service parameters accepting 20 to 100000 sats."""
    return ServiceParameters(
        callback_url="https://bringin.xyz/cb",
        is_amount_fixed=False,
        min_sendable_sats=20,
        max_sendable_sats=100000,
        domain="bringin.xyz",
        metadata_hash="0" * 64,
        identifier="merchant@bringin.xyz",
    )


class TestRequire:
    """Tests for require function."""

    def test_present_value(self):
        """Test that present values pass."""
        require("x", "field")
        require(0, "field")

    def test_missing_values(self):
        """Test that None and empty strings are rejected."""
        for value in [None, "", "   "]:
            with pytest.raises(MissingFieldError) as exc_info:
                require(value, "ln_url_or_address")
            assert str(exc_info.value) == "ln_url_or_address is required"
            assert exc_info.value.kind is ErrorKind.MISSING_FIELD


class TestValidateAmount:
    """Tests for validate_amount function."""

    def test_valid_amounts(self):
        """Test that positive integers pass."""
        for amount in [1, 50, 100, 1000, 25000, 1000000]:
            assert validate_amount(amount) == amount

    def test_invalid_amounts(self):
        """Test that zero, negatives, floats, strings and bools fail."""
        for amount in [0, -1, 1.5, 10.0, "100", None, {}, True]:
            with pytest.raises(InvalidAmountError) as exc_info:
                validate_amount(amount)
            assert exc_info.value.kind is ErrorKind.INVALID_AMOUNT
            assert "must be a positive integer" in str(exc_info.value)


class TestValidateAddress:
    """Tests for Lightning address validation."""

    def test_valid_addresses(self):
        """Test well-formed addresses split into local and domain."""
        assert validate_address("user@sub.domain.com") == ("user", "sub.domain.com")
        assert validate_address("merchant@bringin.xyz") == ("merchant", "bringin.xyz")
        assert validate_address("alice@lightning.network") == ("alice", "lightning.network")

    def test_domain_lowercased(self):
        """Test that the domain part is normalized to lowercase."""
        assert validate_address("Alice@Example.COM") == ("Alice", "example.com")

    def test_invalid_addresses(self):
        """Test malformed addresses."""
        for address in ["user@", "@domain.com", "nodomain", "user.domain.com", "user@localhost", "a@b@c.com"]:
            with pytest.raises(InvalidAddressFormatError) as exc_info:
                validate_address(address)
            assert exc_info.value.kind is ErrorKind.INVALID_ADDRESS_FORMAT

    def test_missing_address(self):
        """Test that empty and None addresses are missing fields."""
        for address in ["", None]:
            with pytest.raises(MissingFieldError):
                validate_address(address)

    def test_is_lightning_address(self):
        """Test the boolean form."""
        assert is_lightning_address("user@sub.domain.com") is True
        for value in ["user@", "@domain.com", "nodomain", "", None, 42]:
            assert is_lightning_address(value) is False


class TestValidateComment:
    """Tests for validate_comment function."""

    def test_accepts_absent_comments(self):
        """Test that None and empty comments always pass."""
        for comment in [None, ""]:
            validate_comment(comment, 0)
            validate_comment(comment, 10)

    def test_accepts_short_comments(self):
        """Test comments within the limit."""
        validate_comment("Test", 10)
        validate_comment("Hello World", 15)
        validate_comment("12345", 5)

    def test_rejects_long_comments(self):
        """Test comments over the limit carry the limit."""
        for comment in ["Too long comment", "1234567890"]:
            with pytest.raises(CommentTooLongError) as exc_info:
                validate_comment(comment, 5)
            assert exc_info.value.limit == 5
            assert str(exc_info.value) == "Comment too long. Maximum: 5 characters"

    def test_rejects_non_text(self):
        """Test that non-string comments are rejected."""
        with pytest.raises(InvalidCommentError):
            validate_comment(123, 144)


class TestValidateAmountBounds:
    """Tests for validate_amount_bounds function."""

    def test_within_bounds(self, params):
        """Test that amounts in [min, max] pass, including the edges."""
        for amount in [20, 21, 5000, 99999, 100000]:
            validate_amount_bounds(amount, params)

    def test_too_small(self, params):
        """Test that amounts below min carry the minimum."""
        with pytest.raises(AmountTooSmallError) as exc_info:
            validate_amount_bounds(19, params)
        assert exc_info.value.minimum == 20
        assert "20" in str(exc_info.value)
        assert exc_info.value.kind is ErrorKind.AMOUNT_TOO_SMALL

    def test_too_large(self, params):
        """Test that amounts above max carry the maximum."""
        with pytest.raises(AmountTooLargeError) as exc_info:
            validate_amount_bounds(100001, params)
        assert exc_info.value.maximum == 100000
        assert "100000" in str(exc_info.value)
        assert exc_info.value.kind is ErrorKind.AMOUNT_TOO_LARGE
