"""
Anthropic Completion Proxy Interface

Provides the single proxied endpoint, /v1/complete.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from keyrelay.api.deps import GatekeeperDep, RetryHandlerDep
from keyrelay.common.errors import BadRequestError
from keyrelay.common.proxy_headers import PREFLIGHT_MAX_AGE
from keyrelay.common.sanitizer import filter_request_body
from keyrelay.domain.outcome import ProxyResult, Relayed
from keyrelay.domain.request import InboundRequest
from keyrelay.services.gatekeeper import is_json_media_type
from keyrelay.services.relay import relay

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Anthropic Proxy"])

COMPLETE_PATH = "/v1/complete"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} in JSON")


async def read_inbound(request: Request) -> InboundRequest:
    """
    Read the inbound request

    The body is parsed only when it is declared as JSON; otherwise it stays
    empty and the gatekeeper rejects the media type.

    Raises:
        BadRequestError: Body is not valid JSON, or not a JSON object
    """
    content_type = request.headers.get("content-type")
    body: dict[str, Any] = {}

    if is_json_media_type(content_type):
        raw = await request.body()
        if raw.strip():
            try:
                # NaN and Infinity are not JSON
                parsed = json.loads(raw, parse_constant=_reject_constant)
            except ValueError as e:
                raise BadRequestError(str(e)) from e
            if not isinstance(parsed, dict):
                raise BadRequestError("Request body must be a JSON object")
            body = parsed

    return InboundRequest(
        content_type=content_type,
        body=body,
        api_key=request.headers.get("x-api-key"),
    )


def render(result: ProxyResult) -> Response:
    """Turn a proxy result into an HTTP response"""
    if isinstance(result, Relayed):
        return StreamingResponse(
            result.body,
            status_code=result.status_code,
            headers=result.headers,
            background=BackgroundTask(result.close),
        )
    return PlainTextResponse(result.message, status_code=result.status_code)


@router.options(COMPLETE_PATH)
async def complete_preflight() -> Response:
    """
    CORS preflight

    Always 204 with no body, whatever the request carried.
    """
    return Response(status_code=204, headers={"Access-Control-Max-Age": PREFLIGHT_MAX_AGE})


@router.post(COMPLETE_PATH)
async def complete(
    request: Request,
    gatekeeper: GatekeeperDep,
    retry_handler: RetryHandlerDep,
) -> Response:
    """
    Anthropic Completion proxy interface

    Validates the caller, forwards the allow-listed body with a rotated
    upstream credential, and relays the upstream answer.
    """
    inbound = await read_inbound(request)
    gatekeeper.validate(inbound)

    body = filter_request_body(inbound.body)
    result = await retry_handler.send(body)

    logger.info(
        "Completion proxied: model=%s, stream=%s, attempts=%s, exhausted=%s",
        body.get("model"),
        inbound.wants_stream,
        result.attempts,
        result.exhausted,
    )

    return render(relay(result.outcome, stream=inbound.wants_stream))
