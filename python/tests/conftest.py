"""
Shared pytest fixtures for lnurl-pos tests.

This module provides common fixtures used across all test files,
including sample provider responses and a recording fake GET capability.
"""

import json

import pytest


class FakeHttpGet:
    """
    Fake GET capability that serves canned JSON by URL prefix.

    Attributes:
        routes: List of (url_prefix, response) pairs, first match wins
        calls: URLs requested, in order
    """

    def __init__(self, routes=None):
        self.routes = list(routes or [])
        self.calls = []

    def add(self, url_prefix, response):
        self.routes.append((url_prefix, response))
        return self

    async def __call__(self, url):
        self.calls.append(url)
        for prefix, response in self.routes:
            if url.startswith(prefix):
                if isinstance(response, Exception):
                    raise response
                return response
        raise AssertionError(f"Unexpected GET {url}")


@pytest.fixture
def pos_service_response():
    """POS discovery response from a Bringin address."""
    return {
        "status": "OK",
        "tag": "payRequest",
        "callback": "https://bringin.xyz/cb",
        "minSendable": 20000,
        "maxSendable": 100000000,
        "metadata": json.dumps([["text/plain", "Coffee"]]),
        "commentAllowed": 144,
    }


@pytest.fixture
def standard_service_response():
    """Standard LUD-06 pay request without a status field."""
    return {
        "tag": "payRequest",
        "callback": "https://example.com/lnurlp/alice/callback",
        "minSendable": 1000,
        "maxSendable": 500000000,
        "metadata": '[["text/plain","Pay to alice"],["text/identifier","alice@example.com"]]',
        "commentAllowed": 32,
    }


@pytest.fixture
def invoice_response():
    """Callback response with a payment request."""
    return {"status": "OK", "pr": "lnbc500n1pjtest", "routes": []}


@pytest.fixture
def fake_get():
    """Create an empty FakeHttpGet."""
    return FakeHttpGet()


@pytest.fixture
def pos_get(pos_service_response, invoice_response):
    """FakeHttpGet serving the POS discovery and callback endpoints."""
    return FakeHttpGet([
        ("https://bringin.xyz/.well-known/lnurlp/", pos_service_response),
        ("https://bringin.xyz/cb", invoice_response),
    ])


@pytest.fixture
def standard_get(standard_service_response, invoice_response):
    """FakeHttpGet serving a standard Lightning address service."""
    return FakeHttpGet([
        ("https://example.com/.well-known/lnurlp/", standard_service_response),
        ("https://example.com/lnurlp/alice/callback", invoice_response),
    ])
