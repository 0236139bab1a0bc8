"""
API Dependency Injection Module

Provides the dependencies required by FastAPI routes. Long-lived objects
(HTTP client, credential pool) are created once in the application lifespan
and stored on ``app.state``.
"""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from keyrelay.config import Settings, get_settings
from keyrelay.providers.anthropic_client import AnthropicClient
from keyrelay.services.credential_pool import CredentialPool
from keyrelay.services.gatekeeper import Gatekeeper
from keyrelay.services.retry_handler import RetryHandler


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the shared upstream HTTP client"""
    return request.app.state.http_client


def get_credential_pool(request: Request) -> CredentialPool:
    """Get the process-wide credential pool"""
    return request.app.state.credential_pool


def get_gatekeeper(settings: SettingsDep) -> Gatekeeper:
    """Get the inbound request gatekeeper"""
    return Gatekeeper(settings.PROXY_KEY)


def get_retry_handler(
    settings: SettingsDep,
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    pool: Annotated[CredentialPool, Depends(get_credential_pool)],
) -> RetryHandler:
    """Get the retrying upstream client"""
    client = AnthropicClient.from_settings(http_client, settings)
    return RetryHandler(client.attempt, pool)


# Dependency type aliases
GatekeeperDep = Annotated[Gatekeeper, Depends(get_gatekeeper)]
RetryHandlerDep = Annotated[RetryHandler, Depends(get_retry_handler)]
