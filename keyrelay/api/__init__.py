"""
API Router Module Initialization
"""

from keyrelay.api.deps import get_credential_pool, get_gatekeeper, get_http_client, get_retry_handler

__all__ = [
    "get_credential_pool",
    "get_gatekeeper",
    "get_http_client",
    "get_retry_handler",
]
