"""
Gatekeeper Module

Validates inbound requests before anything is sent upstream.
"""

import hmac
import logging
from typing import Optional

from keyrelay.common.errors import (
    AuthenticationError,
    BadRequestError,
    UnsupportedMediaTypeError,
)
from keyrelay.domain.request import InboundRequest

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def is_json_media_type(content_type: Optional[str]) -> bool:
    """
    Whether a Content-Type header is exactly the JSON media type

    The header must match verbatim; parameters such as charset are rejected.
    """
    return content_type == JSON_MEDIA_TYPE


class Gatekeeper:
    """
    Inbound Request Gatekeeper

    Checks, in order, stopping at the first failure:
    - Content-Type is application/json (415)
    - ``stream``, when present, is a boolean (400)
    - x-api-key equals the proxy secret (401)
    """

    def __init__(self, proxy_key: str):
        """
        Initialize Gatekeeper

        Args:
            proxy_key: Shared secret callers must present
        """
        self._proxy_key = proxy_key.encode("utf-8")

    def validate(self, inbound: InboundRequest) -> None:
        """
        Validate an inbound request

        Args:
            inbound: Inbound request

        Raises:
            UnsupportedMediaTypeError: Content-Type is not JSON
            BadRequestError: ``stream`` is not a boolean
            AuthenticationError: Shared secret missing or wrong
        """
        if not is_json_media_type(inbound.content_type):
            raise UnsupportedMediaTypeError()

        stream = inbound.body.get("stream")
        if stream is not None and not isinstance(stream, bool):
            raise BadRequestError("The `stream` parameter must be a boolean value")

        if not self._secret_matches(inbound.api_key):
            logger.info("Rejected request with invalid proxy key")
            raise AuthenticationError()

    def _secret_matches(self, provided: Optional[str]) -> bool:
        if provided is None:
            return False
        return hmac.compare_digest(provided.encode("utf-8"), self._proxy_key)
