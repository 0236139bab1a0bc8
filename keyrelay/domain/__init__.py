"""
Domain Model Module Initialization
"""

from keyrelay.domain.outcome import (
    AttemptOutcome,
    Failed,
    ProxyResult,
    Relayed,
    RetryableFailure,
    Success,
    TerminalFailure,
)
from keyrelay.domain.request import InboundRequest

__all__ = [
    "AttemptOutcome",
    "Failed",
    "InboundRequest",
    "ProxyResult",
    "Relayed",
    "RetryableFailure",
    "Success",
    "TerminalFailure",
]
