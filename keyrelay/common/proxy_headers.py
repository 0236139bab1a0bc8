"""
Proxy response header utilities.

httpx decodes any content-encoding the upstream applied before the body is
relayed, so only headers that still describe the relayed bytes are copied.
"""

from __future__ import annotations

from collections.abc import Mapping


# Attached to every response the proxy emits.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, HEAD, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
}

PREFLIGHT_MAX_AGE = "1728000"


def build_relay_headers(upstream_headers: Mapping[str, str] | None, stream: bool) -> dict[str, str]:
    """
    Build the outbound headers for a successful upstream response.

    Copies content-type, and content-length unless the upstream body was
    content-encoded (the decoded length differs). Adds a keep-alive hint when
    the caller asked for streaming.
    """
    headers: dict[str, str] = {}
    lowered = {key.lower(): value for key, value in (upstream_headers or {}).items()}

    content_type = lowered.get("content-type")
    if content_type:
        headers["content-type"] = content_type

    content_length = lowered.get("content-length")
    encoding = lowered.get("content-encoding", "identity").strip().lower()
    if content_length and encoding in ("", "identity"):
        headers["content-length"] = content_length

    if stream:
        headers["connection"] = "keep-alive"

    return headers
