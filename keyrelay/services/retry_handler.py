"""
Retry Handler Module

Implements credential rotation and retry against the upstream.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from keyrelay.common.sanitizer import mask_credential
from keyrelay.domain.outcome import AttemptOutcome, RetryableFailure
from keyrelay.services.credential_pool import CredentialPool

logger = logging.getLogger(__name__)

# Upper bound on upstream calls per inbound request
MAX_ATTEMPTS = 2


class RetryState(enum.Enum):
    """Transition taken after an attempt"""

    # Terminal outcome, relay it
    DONE = "done"
    # Retryable failure with budget left, try another credential
    RETRY = "retry"
    # Retryable failure and no budget left
    EXHAUSTED = "exhausted"


def next_state(outcome: AttemptOutcome, attempt: int, max_attempts: int = MAX_ATTEMPTS) -> RetryState:
    """
    Decide what follows attempt number ``attempt`` (zero-based)

    Only 401/429 responses and transport errors are retried. Every other
    outcome, including upstream 4xx/5xx, ends the loop immediately.
    """
    if not isinstance(outcome, RetryableFailure):
        return RetryState.DONE
    if attempt + 1 < max_attempts:
        return RetryState.RETRY
    return RetryState.EXHAUSTED


@dataclass
class RetryResult:
    """
    Retry Result Data Class

    Encapsulates result information after retry execution.
    """

    # Final outcome; the last retryable failure when exhausted
    outcome: AttemptOutcome
    # Number of upstream calls made
    attempts: int
    # Every attempt failed retryably
    exhausted: bool


AttemptFn = Callable[[dict[str, Any], str], Awaitable[AttemptOutcome]]


class RetryHandler:
    """
    Credential Rotation and Retry Handler

    Implements the following retry logic:
    - Each attempt uses a freshly selected credential
    - 401/429 or transport error: retry while attempts remain
    - Anything else: return immediately, no retry
    - All attempts failed: return the last failure
    Attempts run strictly one after another.
    """

    def __init__(
        self,
        attempt_fn: AttemptFn,
        pool: CredentialPool,
        max_attempts: int = MAX_ATTEMPTS,
    ):
        """
        Initialize Handler

        Args:
            attempt_fn: Performs one upstream call, e.g. ``AnthropicClient.attempt``
            pool: Credential pool
            max_attempts: Upstream call budget per request
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.attempt_fn = attempt_fn
        self.pool = pool
        self.max_attempts = max_attempts

    async def send(self, body: dict[str, Any]) -> RetryResult:
        """
        Execute Request with Retry

        Args:
            body: Sanitized request body

        Returns:
            RetryResult: Retry result
        """
        attempt = 0
        while True:
            credential = self.pool.select()
            outcome = await self.attempt_fn(body, credential)
            state = next_state(outcome, attempt, self.max_attempts)

            if state is RetryState.DONE:
                return RetryResult(outcome=outcome, attempts=attempt + 1, exhausted=False)

            logger.warning(
                "Upstream attempt failed: credential=%s, failure=%s, attempt=%s/%s",
                mask_credential(credential),
                outcome.describe(),
                attempt + 1,
                self.max_attempts,
            )

            if state is RetryState.EXHAUSTED:
                logger.warning(
                    "Upstream retries exhausted after %s attempts: failure=%s",
                    attempt + 1,
                    outcome.describe(),
                )
                return RetryResult(outcome=outcome, attempts=attempt + 1, exhausted=True)

            attempt += 1
