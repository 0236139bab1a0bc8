"""
Strategy Service Module

Provides implementations for upstream credential selection strategies.
"""

import random
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional


class CredentialStrategy(ABC):
    """
    Credential Selection Strategy Abstract Base Class

    Defines the interface for choosing one credential from the pool.
    """

    @abstractmethod
    def choose(self, credentials: Sequence[str]) -> str:
        """
        Choose a credential

        Args:
            credentials: Non-empty sequence of credentials

        Returns:
            str: Selected credential
        """
        pass


class RandomStrategy(CredentialStrategy):
    """
    Uniform Random Strategy

    Every call is an independent uniform draw, so the same credential may be
    returned for consecutive attempts of one request. Holds no per-call state
    and needs no locking.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize Strategy

        Args:
            rng: Random source, defaults to a freshly seeded generator
        """
        self._rng = rng or random.Random()

    def choose(self, credentials: Sequence[str]) -> str:
        return self._rng.choice(credentials)
