"""
Service Layer Module Initialization
"""

from keyrelay.services.credential_pool import CredentialPool
from keyrelay.services.gatekeeper import Gatekeeper
from keyrelay.services.relay import relay
from keyrelay.services.retry_handler import MAX_ATTEMPTS, RetryHandler, RetryResult, RetryState
from keyrelay.services.strategy import CredentialStrategy, RandomStrategy

__all__ = [
    "CredentialPool",
    "CredentialStrategy",
    "Gatekeeper",
    "MAX_ATTEMPTS",
    "RandomStrategy",
    "RetryHandler",
    "RetryResult",
    "RetryState",
    "relay",
]
