"""
Location: python/lnurl_pos/metadata.py

Summary:
    Pure helpers for LNURL-pay metadata: parsing the string-or-list wire
    form and extracting the description, image and metadata hash.

Usage:
    Used when building ServiceParameters from a discovery response. The
    extraction helpers never raise, so they are safe to call on untrusted
    provider data.

Example:
    from lnurl_pos.metadata import description, image, metadata_hash

    meta = [["text/plain", "Coffee"], ["image/png;base64", "iVBOR..."]]
    description(meta)     # "Coffee"
    image(meta)           # "iVBOR..."
    metadata_hash(meta)   # sha256 hex
"""

import hashlib
import json
from typing import Any

from .errors import UnexpectedResponseShapeError


DEFAULT_DESCRIPTION = "Payment"

EMPTY_HASH = hashlib.sha256(b"").hexdigest()


def parse_metadata(raw: Any) -> list[list[Any]]:
    """
    Parse provider metadata into an ordered list of entries.

    Providers send metadata either as JSON text (the LUD-06 form) or,
    less commonly, as an already decoded list.

    Args:
        raw: The "metadata" field of a discovery response

    Returns:
        List of [content_type, payload] entries

    Raises:
        UnexpectedResponseShapeError: If the value is neither form
    """
    if isinstance(raw, str):
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise UnexpectedResponseShapeError(f"metadata is not valid JSON: {exc}") from exc
    elif isinstance(raw, list):
        entries = raw
    else:
        raise UnexpectedResponseShapeError(
            f"metadata must be a list or JSON text, got {type(raw).__name__}"
        )

    if not isinstance(entries, list):
        raise UnexpectedResponseShapeError("metadata must decode to a list")

    for entry in entries:
        if not isinstance(entry, list) or len(entry) < 2 or not isinstance(entry[0], str):
            raise UnexpectedResponseShapeError(f"Malformed metadata entry: {entry!r}")

    return entries


def _entries(metadata: Any):
    if not isinstance(metadata, (list, tuple)):
        return
    for entry in metadata:
        if isinstance(entry, (list, tuple)) and len(entry) >= 2 and isinstance(entry[0], str):
            yield entry[0], entry[1]


def description(metadata: Any) -> str:
    """
    Get the text/plain description from metadata.

    Args:
        metadata: Metadata entry list (any other value is tolerated)

    Returns:
        Payload of the first text/plain entry, or "Payment"
    """
    for content_type, payload in _entries(metadata):
        if content_type == "text/plain" and isinstance(payload, str):
            return payload
    return DEFAULT_DESCRIPTION


def image(metadata: Any) -> str:
    """
    Get the image payload from metadata.

    Args:
        metadata: Metadata entry list (any other value is tolerated)

    Returns:
        Payload of the first image/* entry, or an empty string
    """
    for content_type, payload in _entries(metadata):
        if content_type.startswith("image/") and isinstance(payload, str):
            return payload
    return ""


def metadata_hash(metadata: Any) -> str:
    """
    Compute the SHA-256 hash of serialized metadata.

    Text is hashed verbatim, which is what LUD-06 description hashes commit
    to. Lists are serialized as compact JSON, matching JSON.stringify.
    Anything that cannot be serialized (cyclic structures, arbitrary
    objects) hashes as the empty string instead of raising.

    Args:
        metadata: Metadata as received (text) or as an entry list

    Returns:
        Lowercase hex-encoded SHA-256 digest
    """
    if metadata is None:
        return EMPTY_HASH

    try:
        if isinstance(metadata, str):
            serialized = metadata
        else:
            serialized = json.dumps(metadata, separators=(",", ":"), ensure_ascii=False)
        data = serialized.encode("utf-8")
    except (TypeError, ValueError, RecursionError):
        return EMPTY_HASH

    return hashlib.sha256(data).hexdigest()


# Names used by the JavaScript lnurl-pay API
parse_description = description
extract_image = image
calculate_metadata_hash = metadata_hash
