"""
Middleware Module
"""

from keyrelay.middleware.cors import ProxyHeadersMiddleware

__all__ = ["ProxyHeadersMiddleware"]
