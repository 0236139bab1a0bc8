"""
Test Configuration Module
"""

from collections.abc import Sequence
from typing import Callable, Union

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from keyrelay.api.deps import get_credential_pool, get_http_client
from keyrelay.config import Settings, get_settings
from keyrelay.main import build_http_client, create_app
from keyrelay.services.credential_pool import CredentialPool
from keyrelay.services.strategy import CredentialStrategy


PROXY_KEY = "proxy-secret-for-tests"
CREDENTIALS = ("sk-ant-test-key-1111", "sk-ant-test-key-2222")
UPSTREAM_URL = "https://upstream.test/v1/complete"

Reply = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class SequenceStrategy(CredentialStrategy):
    """Hands out credentials in order, cycling, and records every pick"""

    def __init__(self, order: Sequence[str] | None = None):
        self.order = list(order) if order else None
        self.picks: list[str] = []

    def choose(self, credentials: Sequence[str]) -> str:
        candidates = self.order or list(credentials)
        picked = candidates[len(self.picks) % len(candidates)]
        self.picks.append(picked)
        return picked


class FakeUpstream:
    """
    Upstream test double

    Replays scripted replies, one per call, and records every request it sees.
    A reply may be a response, an exception to raise, or a callable building
    the response from the request.
    """

    def __init__(self):
        self.replies: list[Reply] = []
        self.requests: list[httpx.Request] = []

    def script(self, *replies: Reply) -> "FakeUpstream":
        self.replies.extend(replies)
        return self

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError("Unexpected upstream call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        API_KEYS=list(CREDENTIALS),
        PROXY_KEY=PROXY_KEY,
        UPSTREAM_URL=UPSTREAM_URL,
        _env_file=None,
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def strategy() -> SequenceStrategy:
    return SequenceStrategy()


@pytest_asyncio.fixture
async def upstream_http_client(settings, upstream):
    """HTTP client whose transport is the upstream test double"""
    async with build_http_client(settings, transport=httpx.MockTransport(upstream.handler)) as client:
        yield client


@pytest.fixture
def proxy_app(settings, upstream_http_client, strategy):
    """Application wired to the upstream test double"""
    app = create_app()
    pool = CredentialPool(settings.API_KEYS, strategy=strategy)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = lambda: upstream_http_client
    app.dependency_overrides[get_credential_pool] = lambda: pool
    yield app
    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def client(proxy_app):
    """Caller-side client talking to the proxy"""
    transport = ASGITransport(app=proxy_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
