"""
Location: python/lnurl_pos/lnurl.py

Summary:
    Resolution of LNURL identifiers to the HTTP URL of the pay service.
    Supports Lightning addresses (LUD-16), bech32 LNURLs (LUD-01),
    lnurlp:// URLs (LUD-17) and plain http(s) URLs.

Usage:
    Used by standard.py to find the discovery URL for any identifier, and
    by tests to build bech32 LNURLs.

Example:
    from lnurl_pos.lnurl import decode_lnurl, resolve_url

    resolve_url("alice@example.com")
    # "https://example.com/.well-known/lnurlp/alice"
    decode_lnurl("lnurl1dp68gurn8ghj7...")
    # "https://service.com/api?q=3fc3645b439ce8e7"
"""

from urllib.parse import urlsplit

from bech32 import CHARSET, bech32_encode, bech32_verify_checksum, convertbits

from .errors import InvalidAddressFormatError
from .transport import build_discovery_url, ensure_onion_allowed
from .validation import split_address


LNURL_HRP = "lnurl"

LIGHTNING_PREFIX = "lightning:"

# LUD-17 schemes, all resolved to an https pay request
LUD17_SCHEMES = ("lnurlp", "lnurlc", "lnurlw", "keyauth")

_CHECKSUM_LENGTH = 6


def strip_lightning_prefix(value: str) -> str:
    """Remove a leading "lightning:" URI prefix, if any."""
    value = value.strip()
    if value.lower().startswith(LIGHTNING_PREFIX):
        return value[len(LIGHTNING_PREFIX):]
    return value


def decode_lnurl(lnurl: str) -> str:
    """
    Decode a bech32 LNURL into its URL.

    LNURLs are usually longer than the 90 characters plain bech32 allows,
    so the checksum is verified directly instead of via bech32_decode.

    Args:
        lnurl: bech32 string with the "lnurl" human-readable part

    Returns:
        Decoded URL

    Raises:
        InvalidAddressFormatError: If the string is not a valid LNURL
    """
    bech = strip_lightning_prefix(lnurl)
    if bech.lower() != bech and bech.upper() != bech:
        raise InvalidAddressFormatError("Invalid LNURL: mixed case")
    bech = bech.lower()

    separator = bech.rfind("1")
    hrp, payload = bech[:separator], bech[separator + 1:]
    if hrp != LNURL_HRP or len(payload) < _CHECKSUM_LENGTH:
        raise InvalidAddressFormatError("Invalid LNURL")
    if any(char not in CHARSET for char in payload):
        raise InvalidAddressFormatError("Invalid LNURL: bad character")

    data = [CHARSET.find(char) for char in payload]
    if not bech32_verify_checksum(hrp, data):
        raise InvalidAddressFormatError("Invalid LNURL: checksum mismatch")

    decoded = convertbits(data[:-_CHECKSUM_LENGTH], 5, 8, False)
    if decoded is None:
        raise InvalidAddressFormatError("Invalid LNURL: bad padding")
    try:
        return bytes(decoded).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidAddressFormatError("Invalid LNURL: payload is not UTF-8") from exc


def encode_lnurl(url: str) -> str:
    """Encode a URL as an uppercase bech32 LNURL."""
    data = convertbits(url.encode("utf-8"), 8, 5, True)
    return bech32_encode(LNURL_HRP, data).upper()


def resolve_url(ln_url_or_address: str, onion_allowed: bool = False) -> str:
    """
    Resolve any supported identifier to the pay service URL.

    Args:
        ln_url_or_address: Lightning address, LNURL or URL
        onion_allowed: Allow .onion services

    Returns:
        The http(s) URL to fetch the pay request from

    Raises:
        InvalidAddressFormatError: If the identifier is not recognised
        OnionNotAllowedError: If it resolves to .onion without permission
    """
    value = strip_lightning_prefix(ln_url_or_address)

    address = split_address(value)
    if has_url_scheme(value):
        url = _resolve_scheme(value)
    elif address is not None:
        url = build_discovery_url(*address)
    elif value.lower().startswith(LNURL_HRP + "1"):
        url = decode_lnurl(value)
    else:
        raise InvalidAddressFormatError("Invalid LNURL or Lightning address format")

    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidAddressFormatError(f"Invalid LNURL target: {url}")
    ensure_onion_allowed(url, onion_allowed)
    return url


def has_url_scheme(value: str) -> bool:
    """Check whether value is an http(s) or LUD-17 URL."""
    scheme, separator, _ = value.partition("://")
    return bool(separator) and scheme.lower() in ("http", "https") + LUD17_SCHEMES


def _resolve_scheme(value: str) -> str:
    parts = urlsplit(value)
    if parts.scheme.lower() in ("http", "https"):
        return value
    host = parts.hostname or ""
    target = "http" if host.endswith(".onion") else "https"
    return parts._replace(scheme=target).geturl()
