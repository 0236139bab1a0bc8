"""
Proxy API Module Initialization
"""

from keyrelay.api.proxy.complete import router as complete_router

__all__ = [
    "complete_router",
]
