"""
Anthropic Protocol Client

Sends one completion request to the upstream and classifies the result.
"""

import json
import logging
from typing import Any

import httpx

from keyrelay.common.sanitizer import sanitize_headers
from keyrelay.config import Settings
from keyrelay.domain.outcome import (
    AttemptOutcome,
    RetryableFailure,
    Success,
    TerminalFailure,
)

logger = logging.getLogger(__name__)


class AnthropicClient:
    """
    Anthropic Protocol Client

    Performs a single attempt against the upstream completion endpoint with a
    given credential. Retrying is the caller's concern.
    """

    # Statuses a different credential may fix
    RETRYABLE_STATUS_CODES = frozenset({401, 429})

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url: str,
        anthropic_version: str = "2023-06-01",
        user_agent: str = "Anthropic/Python 0.3.1",
    ):
        """
        Initialize client

        Args:
            http_client: Shared HTTP client (connection pool)
            url: Upstream completion endpoint
            anthropic_version: anthropic-version header value
            user_agent: User-Agent header value
        """
        self.http_client = http_client
        self.url = url
        self.anthropic_version = anthropic_version
        self.user_agent = user_agent

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient, settings: Settings) -> "AnthropicClient":
        return cls(
            http_client,
            url=settings.UPSTREAM_URL,
            anthropic_version=settings.ANTHROPIC_VERSION,
            user_agent=settings.UPSTREAM_USER_AGENT,
        )

    def _prepare_headers(self, credential: str) -> dict[str, str]:
        """
        Prepare Anthropic request headers

        Anthropic uses the x-api-key header for authentication.
        """
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "x-api-key": credential,
            "User-Agent": self.user_agent,
            "anthropic-version": self.anthropic_version,
        }

    async def attempt(self, body: dict[str, Any], credential: str) -> AttemptOutcome:
        """
        Forward the request once

        Args:
            body: Sanitized request body
            credential: Upstream credential for this attempt

        Returns:
            AttemptOutcome: ``Success`` keeps the response open for streaming;
            failures have their body read and the connection released.
        """
        headers = self._prepare_headers(credential)

        logger.debug(
            "Anthropic Request: url=%s headers=%s body=%s",
            self.url,
            sanitize_headers(headers),
            json.dumps(body, ensure_ascii=False),
        )

        request = self.http_client.build_request("POST", self.url, headers=headers, json=body)
        try:
            response = await self.http_client.send(request, stream=True)
        except httpx.RequestError as e:
            return RetryableFailure(error=e)

        if response.status_code < 400:
            return Success(
                status_code=response.status_code,
                headers=response.headers,
                response=response,
            )

        try:
            await response.aread()
        except httpx.RequestError as e:
            return RetryableFailure(error=e)
        finally:
            await response.aclose()

        if response.status_code in self.RETRYABLE_STATUS_CODES:
            return RetryableFailure(
                status_code=response.status_code,
                headers=response.headers,
                text=response.text,
            )

        return TerminalFailure(
            status_code=response.status_code,
            headers=response.headers,
            text=response.text,
        )
