"""
Request Domain Model

Defines the inbound request as seen by the gatekeeper.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class InboundRequest:
    """
    Inbound Request Data Class

    Encapsulates what the caller sent to the completion endpoint.
    """

    # Raw Content-Type header value
    content_type: Optional[str]
    # Parsed JSON body; empty when the media type was not JSON
    body: dict[str, Any] = field(default_factory=dict)
    # Caller-supplied shared secret (x-api-key header)
    api_key: Optional[str] = None

    @property
    def wants_stream(self) -> bool:
        """Is stream request"""
        return self.body.get("stream") is True
