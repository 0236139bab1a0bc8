"""
Response Header Middleware Module

Attaches the fixed CORS header set and a no-cache directive to every response.
"""

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from keyrelay.common.proxy_headers import CORS_HEADERS, NO_CACHE_HEADERS


class ProxyHeadersMiddleware:
    """
    Pure ASGI middleware

    Only touches the ``http.response.start`` message, so streamed bodies pass
    through untouched and unbuffered.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in {**CORS_HEADERS, **NO_CACHE_HEADERS}.items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_headers)
