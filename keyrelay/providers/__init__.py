"""
Upstream Provider Client Module Initialization
"""

from keyrelay.providers.anthropic_client import AnthropicClient

__all__ = [
    "AnthropicClient",
]
