"""ASGI middleware for applog."""

from .access import AccessLogMiddleware

__all__ = ["AccessLogMiddleware"]
