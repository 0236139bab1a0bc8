"""
Credential Pool Module

Holds the upstream credentials for the lifetime of the process.
"""

from collections.abc import Iterable
from typing import Optional

from keyrelay.services.strategy import CredentialStrategy, RandomStrategy


class CredentialPool:
    """
    Upstream Credential Pool

    Immutable after construction; safe to share between concurrent requests.
    """

    def __init__(
        self,
        credentials: Iterable[str],
        strategy: Optional[CredentialStrategy] = None,
    ):
        """
        Initialize Pool

        Args:
            credentials: Upstream credentials, at least one
            strategy: Selection strategy, defaults to uniform random

        Raises:
            ValueError: No credentials were given
        """
        self._credentials: tuple[str, ...] = tuple(credentials)
        if not self._credentials:
            raise ValueError("Credential pool requires at least one credential")
        self._strategy = strategy or RandomStrategy()

    def __len__(self) -> int:
        return len(self._credentials)

    @property
    def credentials(self) -> tuple[str, ...]:
        return self._credentials

    def select(self) -> str:
        """
        Select a credential for one upstream attempt

        Returns:
            str: Credential chosen by the strategy
        """
        return self._strategy.choose(self._credentials)
