"""
Data Sanitization Module

Reduces inbound request bodies to the fields the upstream accepts, and masks
credentials so logs never contain them in plain text.
"""

from collections.abc import Mapping
from typing import Any

# Top-level request fields forwarded to the upstream completion API
ALLOWED_BODY_KEYS = frozenset(
    {
        "metadata",
        "model",
        "prompt",
        "max_tokens_to_sample",
        "temperature",
        "top_p",
        "top_k",
        "stream",
    }
)

# Only metadata sub-key forwarded upstream
ALLOWED_METADATA_KEY = "user_id"


def filter_request_body(body: Mapping[str, Any]) -> dict[str, Any]:
    """
    Filter request body

    Keeps only the allow-listed top-level keys. ``metadata`` is rebuilt to hold
    nothing but ``user_id``, and is dropped when it has no ``user_id``. Values
    are not validated; the upstream is the authority on them.

    Args:
        body: Parsed inbound JSON object

    Returns:
        dict: New dictionary, the input is not modified

    Examples:
        >>> filter_request_body({"prompt": "hi", "foo": 1, "metadata": {"user_id": "u", "x": 2}})
        {'prompt': 'hi', 'metadata': {'user_id': 'u'}}
    """
    filtered = {key: value for key, value in body.items() if key in ALLOWED_BODY_KEYS}

    if "metadata" in filtered:
        metadata = filtered["metadata"]
        if isinstance(metadata, Mapping) and ALLOWED_METADATA_KEY in metadata:
            filtered["metadata"] = {ALLOWED_METADATA_KEY: metadata[ALLOWED_METADATA_KEY]}
        else:
            del filtered["metadata"]

    return filtered


def mask_credential(value: str | None) -> str | None:
    """
    Mask a credential for logging

    Keeps the first 4 and last 2 characters for identification.

    Examples:
        >>> mask_credential("sk-ant-1234567890abcdef")
        'sk-a***...***ef'
        >>> mask_credential("short")
        '***'
    """
    if not value:
        return value

    # If token is too short, mask directly
    if len(value) <= 8:
        return "***"

    return f"{value[:4]}***...***{value[-2:]}"


def sanitize_headers(headers: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Sanitize request headers

    Masks x-api-key, authorization and api-key values.

    Args:
        headers: Original headers mapping

    Returns:
        dict: Sanitized headers dictionary (new dictionary, original data not modified)
    """
    if not headers:
        return {}

    sensitive_fields = {"authorization", "x-api-key", "api-key"}

    sanitized = {}
    for key, value in headers.items():
        if key.lower() in sensitive_fields and isinstance(value, str):
            sanitized[key] = mask_credential(value)
        else:
            sanitized[key] = value

    return sanitized
