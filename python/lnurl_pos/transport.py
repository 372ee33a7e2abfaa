"""
Location: python/lnurl_pos/transport.py

Summary:
    HTTP transport layer. Defines the HttpGet capability, the default
    httpx-backed implementation, the timeout-bounded fetch used for every
    outbound request, and URL helpers for discovery and callback URLs.

Usage:
    Used by standard.py and pos.py for both protocol steps. A custom
    HttpGet can be injected through the client to replace httpx.

Example:
    import httpx
    from lnurl_pos.transport import HttpxGet, fetch_json

    async with httpx.AsyncClient() as http:
        data = await fetch_json(
            "https://bringin.xyz/.well-known/lnurlp/merchant?pos=true",
            HttpxGet(http),
            timeout=30.0,
        )
"""

import asyncio
import logging
from typing import Any, Optional, Protocol
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import httpx

from .errors import (
    LnurlPayError,
    LnurlTimeoutError,
    OnionNotAllowedError,
    ServiceError,
    TransportError,
    UnexpectedResponseShapeError,
)


logger = logging.getLogger(__name__)

WELL_KNOWN_PATH = "/.well-known/lnurlp/"

POS_QUERY = {"pos": "true"}


class HttpGet(Protocol):
    """
    Capability for issuing a GET request.

    Implementations fetch the URL and return the decoded JSON body. They
    may raise LnurlPayError subclasses themselves; httpx and OS errors are
    translated by fetch_json.
    """

    async def __call__(self, url: str) -> Any:
        ...


class HttpxGet:
    """
    Default HttpGet backed by an httpx.AsyncClient.

    Attributes:
        client: The httpx client requests are sent with
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def __call__(self, url: str) -> Any:
        """
        GET a URL and decode its JSON body.

        Args:
            url: Full URL including query string

        Returns:
            Decoded JSON body

        Raises:
            ServiceError: If the HTTP status is 4xx/5xx
            UnexpectedResponseShapeError: If the body is not JSON
        """
        response = await self.client.get(url, follow_redirects=True)

        try:
            data = response.json()
        except ValueError as exc:
            if response.is_error:
                raise ServiceError(status_code=response.status_code) from exc
            raise UnexpectedResponseShapeError("Response body is not valid JSON") from exc

        if response.is_error:
            reason = data.get("reason") if isinstance(data, dict) else None
            raise ServiceError(reason, status_code=response.status_code)

        return data


async def fetch_json(url: str, http_get: HttpGet, timeout: float) -> dict[str, Any]:
    """
    Fetch a JSON object with a hard timeout.

    Args:
        url: Full URL including query string
        http_get: GET capability to use
        timeout: Seconds before the call is cancelled

    Returns:
        Decoded JSON object

    Raises:
        LnurlTimeoutError: If the call does not finish within timeout
        TransportError: For network, DNS or TLS failures, or an invalid URL
        UnexpectedResponseShapeError: If the body is not a JSON object
    """
    logger.debug("GET %s", _redact(url))
    try:
        data = await asyncio.wait_for(http_get(url), timeout=timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        logger.warning("GET %s timed out after %gs", _redact(url), timeout)
        raise LnurlTimeoutError(timeout) from exc
    except LnurlPayError:
        raise
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
        raise TransportError(f"GET {_redact(url)} failed: {exc}") from exc

    if not isinstance(data, dict):
        raise UnexpectedResponseShapeError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data


def add_query_params(url: str, params: dict[str, Any]) -> str:
    """
    Append query parameters to a URL, keeping any it already has.

    Values are percent-encoded (spaces become %20).

    Args:
        url: Base URL
        params: Parameters to append; None values are skipped

    Returns:
        URL with the parameters appended
    """
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.extend((key, str(value)) for key, value in params.items() if value is not None)
    return urlunsplit(parts._replace(query=urlencode(query, quote_via=quote)))


def is_onion_url(url: str) -> bool:
    """Check whether a URL points to a Tor hidden service."""
    host = urlsplit(url).hostname or ""
    return host.endswith(".onion")


def ensure_onion_allowed(url: str, onion_allowed: bool) -> None:
    """
    Refuse .onion URLs unless onion access was granted.

    Args:
        url: URL about to be fetched
        onion_allowed: Whether .onion services may be contacted

    Raises:
        OnionNotAllowedError: If url is a .onion URL and onion_allowed is False
    """
    if not onion_allowed and is_onion_url(url):
        raise OnionNotAllowedError(url)


def build_discovery_url(local: str, domain: str, pos: bool = False) -> str:
    """
    Build the LUD-16 discovery URL for a Lightning address.

    Args:
        local: Local part of the address
        domain: Domain part of the address
        pos: Add the POS-mode query flag

    Returns:
        https://{domain}/.well-known/lnurlp/{local}, http:// for .onion
    """
    scheme = "http" if domain.endswith(".onion") else "https"
    url = f"{scheme}://{domain}{WELL_KNOWN_PATH}{quote(local, safe='')}"
    if pos:
        url = add_query_params(url, POS_QUERY)
    return url


def host_of(url: str) -> str:
    """Return the lowercase host of a URL, or an empty string."""
    return (urlsplit(url).hostname or "").lower()


def _redact(url: str) -> str:
    # Query strings carry comments and amounts
    return urlsplit(url)._replace(query="", fragment="").geturl()
