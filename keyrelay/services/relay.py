"""
Response Relay Module

Maps the final upstream outcome onto what the caller receives.
"""

import logging
from collections.abc import AsyncIterator

import httpx

from keyrelay.common.proxy_headers import build_relay_headers
from keyrelay.domain.outcome import (
    AttemptOutcome,
    Failed,
    ProxyResult,
    Relayed,
    RetryableFailure,
    Success,
    TerminalFailure,
)

logger = logging.getLogger(__name__)


async def iter_upstream_body(response: httpx.Response) -> AsyncIterator[bytes]:
    """
    Yield the upstream body as it arrives

    Chunks are forwarded as soon as httpx hands them over, never buffered.
    The upstream response is closed when iteration ends, fails, or is
    abandoned because the caller went away.
    """
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    finally:
        await response.aclose()


def relay(outcome: AttemptOutcome, stream: bool = False) -> ProxyResult:
    """
    Build the caller-facing result

    Args:
        outcome: Final outcome from the retry handler
        stream: Whether the caller asked for a streamed completion

    Returns:
        ProxyResult: ``Relayed`` for upstream status < 400, ``Failed`` otherwise
    """
    if isinstance(outcome, Success):
        return Relayed(
            status_code=outcome.status_code,
            headers=build_relay_headers(outcome.headers, stream),
            body=iter_upstream_body(outcome.response),
            close=outcome.response.aclose,
        )

    if isinstance(outcome, TerminalFailure):
        logger.info("Relaying upstream error: status_code=%s", outcome.status_code)
        return Failed(status_code=outcome.status_code, message=outcome.text)

    if isinstance(outcome, RetryableFailure):
        if outcome.error is not None:
            return Failed(
                status_code=500,
                message=str(outcome.error) or type(outcome.error).__name__,
            )
        return Failed(status_code=outcome.status_code, message=outcome.text)

    raise TypeError(f"Unknown upstream outcome: {outcome!r}")
