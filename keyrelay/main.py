"""
keyrelay Application Entry Point

FastAPI application main entry, including router registration and application configuration.
"""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from keyrelay.api.proxy import complete_router
from keyrelay.common.errors import NotFoundError, ProxyError
from keyrelay.common.proxy_headers import CORS_HEADERS, NO_CACHE_HEADERS
from keyrelay.config import Settings, get_settings
from keyrelay.logging_config import setup_logging
from keyrelay.middleware import ProxyHeadersMiddleware
from keyrelay.services.credential_pool import CredentialPool

logger = logging.getLogger(__name__)


def build_http_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Build the shared upstream HTTP client

    Upstream redirects are followed, so callers only ever see the final response.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT, connect=settings.HTTP_CONNECT_TIMEOUT),
        follow_redirects=True,
        transport=transport,
    )


# Application Lifecycle Management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application Lifecycle Management

    Builds the credential pool and the shared upstream HTTP client on startup,
    closes the client on shutdown. Invalid configuration aborts startup here.
    """
    settings = get_settings()
    app.state.credential_pool = CredentialPool(settings.API_KEYS)
    app.state.http_client = build_http_client(settings)
    logger.info(
        "Proxy ready: upstream=%s, credentials=%s",
        settings.UPSTREAM_URL,
        len(app.state.credential_pool),
    )
    yield
    await app.state.http_client.aclose()


async def proxy_error_handler(request: Request, exc: ProxyError):
    """Handle proxy errors as plain text"""
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handle router-level HTTP errors

    Unknown paths and unsupported methods both answer 404 Not found.
    """
    if exc.status_code in (404, 405):
        not_found = NotFoundError()
        return PlainTextResponse(not_found.message, status_code=not_found.status_code)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions

    Runs outside the middleware stack, so the fixed headers are attached here.
    """
    logger.error(
        "Uncaught exception: %s\nPath: %s\nTraceback:\n%s",
        str(exc),
        request.url.path,
        traceback.format_exc(),
    )
    return PlainTextResponse(
        "Internal server error",
        status_code=500,
        headers={**CORS_HEADERS, **NO_CACHE_HEADERS},
    )


def create_app() -> FastAPI:
    """
    Create the FastAPI application

    Settings are not read here, only in the lifespan and dependencies, so
    importing the module never requires configuration.
    """
    app = FastAPI(
        title="keyrelay",
        description="Anthropic completion proxy with upstream credential rotation",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.add_middleware(ProxyHeadersMiddleware)

    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(complete_router)
    return app


app = create_app()


def run() -> None:
    """Run the proxy with uvicorn"""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.DEBUG)
    logger.info("Server listening on port %s", settings.PORT)
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
