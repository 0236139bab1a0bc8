"""
Outcome Domain Model

Defines the result of a single upstream attempt and the final result
returned to the caller.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Optional, Union

import httpx


@dataclass
class Success:
    """
    Non-error upstream response (status < 400)

    The upstream response is still open; its body is consumed once, lazily.
    """

    # HTTP status code
    status_code: int
    # Response headers
    headers: httpx.Headers
    # Open streaming response
    response: httpx.Response


@dataclass
class RetryableFailure:
    """
    Failure that another credential may fix

    Either a 401/429 response (body already read, connection released) or a
    transport error, in which case ``status_code`` is None.
    """

    # HTTP status code, None for transport errors
    status_code: Optional[int] = None
    # Response headers
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    # Response body text
    text: str = ""
    # Transport error
    error: Optional[Exception] = None

    @property
    def is_transport_error(self) -> bool:
        """Whether the attempt never produced a response"""
        return self.error is not None

    def describe(self) -> str:
        """Short description for logs"""
        if self.error is not None:
            return f"{type(self.error).__name__}: {self.error}"
        return f"status_code={self.status_code}"


@dataclass
class TerminalFailure:
    """
    Upstream error response that is relayed as-is (status >= 400, not 401/429)
    """

    # HTTP status code
    status_code: int
    # Response headers
    headers: httpx.Headers
    # Response body text
    text: str


AttemptOutcome = Union[Success, RetryableFailure, TerminalFailure]


@dataclass
class Relayed:
    """
    Upstream response streamed through to the caller
    """

    # HTTP status code
    status_code: int
    # Outbound headers
    headers: dict[str, str]
    # Lazy, single-pass body; closes the upstream response when done or abandoned
    body: AsyncIterator[bytes]
    # Releases the upstream connection; safe to call more than once
    close: Callable[[], Awaitable[None]]


@dataclass
class Failed:
    """
    Plain-text failure returned to the caller
    """

    # HTTP status code
    status_code: int
    # Response body text
    message: str


ProxyResult = Union[Relayed, Failed]
