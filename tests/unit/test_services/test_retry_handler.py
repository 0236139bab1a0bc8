"""
Retry Handler Unit Tests
"""

import httpx
import pytest

from keyrelay.domain.outcome import RetryableFailure, Success, TerminalFailure
from keyrelay.services.credential_pool import CredentialPool
from keyrelay.services.retry_handler import (
    MAX_ATTEMPTS,
    RetryHandler,
    RetryState,
    next_state,
)


def _success() -> Success:
    response = httpx.Response(200, content=b'{"completion": "ok"}')
    return Success(status_code=200, headers=response.headers, response=response)


def _retryable(status_code=429, text="rate limited") -> RetryableFailure:
    return RetryableFailure(status_code=status_code, text=text)


def _terminal(status_code=500, text="boom") -> TerminalFailure:
    return TerminalFailure(status_code=status_code, headers=httpx.Headers(), text=text)


class TestNextState:
    """Transition Function Tests"""

    def test_success_is_done(self):
        assert next_state(_success(), 0) is RetryState.DONE

    def test_terminal_failure_is_done_on_any_attempt(self):
        assert next_state(_terminal(), 0) is RetryState.DONE
        assert next_state(_terminal(400), 1) is RetryState.DONE

    def test_retryable_with_budget_left_retries(self):
        assert next_state(_retryable(), 0) is RetryState.RETRY

    def test_retryable_on_last_attempt_is_exhausted(self):
        assert next_state(_retryable(), MAX_ATTEMPTS - 1) is RetryState.EXHAUSTED

    def test_transport_error_is_retryable(self):
        failure = RetryableFailure(error=httpx.ConnectError("refused"))
        assert next_state(failure, 0) is RetryState.RETRY

    def test_custom_budget(self):
        assert next_state(_retryable(), 1, max_attempts=3) is RetryState.RETRY
        assert next_state(_retryable(), 2, max_attempts=3) is RetryState.EXHAUSTED


class TestRetryHandler:
    """Retry Handler Tests"""

    @pytest.fixture(autouse=True)
    def _setup(self, strategy):
        self.strategy = strategy
        self.pool = CredentialPool(["sk-1", "sk-2"], strategy=strategy)
        self.calls: list[tuple[dict, str]] = []

    def _handler(self, *outcomes) -> RetryHandler:
        script = list(outcomes)

        async def attempt_fn(body, credential):
            self.calls.append((body, credential))
            return script.pop(0)

        return RetryHandler(attempt_fn, self.pool)

    @pytest.mark.asyncio
    async def test_success_on_first_try(self):
        success = _success()
        handler = self._handler(success)

        result = await handler.send({"prompt": "hi"})

        assert result.outcome is success
        assert result.attempts == 1
        assert result.exhausted is False
        assert self.calls == [({"prompt": "hi"}, "sk-1")]

    @pytest.mark.asyncio
    async def test_retry_with_fresh_credential_after_401(self):
        success = _success()
        handler = self._handler(_retryable(401, "invalid x-api-key"), success)

        result = await handler.send({"prompt": "hi"})

        assert result.outcome is success
        assert result.attempts == 2
        assert [credential for _, credential in self.calls] == ["sk-1", "sk-2"]

    @pytest.mark.asyncio
    async def test_exhausted_returns_last_failure(self):
        first = _retryable(429, "first")
        second = _retryable(429, "second")
        handler = self._handler(first, second)

        result = await handler.send({})

        assert result.exhausted is True
        assert result.attempts == 2
        assert result.outcome is second

    @pytest.mark.asyncio
    async def test_terminal_failure_not_retried(self):
        terminal = _terminal(500, "overloaded")
        handler = self._handler(terminal, _success())

        result = await handler.send({})

        assert result.outcome is terminal
        assert result.attempts == 1
        assert len(self.calls) == 1

    @pytest.mark.asyncio
    async def test_transport_error_then_success(self):
        success = _success()
        handler = self._handler(RetryableFailure(error=httpx.ConnectError("refused")), success)

        result = await handler.send({})

        assert result.outcome is success
        assert result.attempts == 2

    @pytest.mark.asyncio
    async def test_mixed_failures_exhaust_with_transport_error_last(self):
        transport_failure = RetryableFailure(error=httpx.ReadTimeout("timed out"))
        handler = self._handler(_retryable(401), transport_failure)

        result = await handler.send({})

        assert result.exhausted is True
        assert result.outcome is transport_failure

    @pytest.mark.asyncio
    async def test_never_exceeds_budget(self):
        handler = self._handler(*[_retryable() for _ in range(5)])

        result = await handler.send({})

        assert result.attempts == MAX_ATTEMPTS
        assert len(self.calls) == MAX_ATTEMPTS

    def test_rejects_empty_budget(self):
        with pytest.raises(ValueError):
            RetryHandler(lambda body, credential: None, self.pool, max_attempts=0)
